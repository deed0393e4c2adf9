"""
Serviço de endereços.

Mantém a relação 1:1 entre cliente e endereço: o endereço guarda o id
interno do cliente e o cliente guarda o id interno do endereço. Como as
duas escritas não são atômicas, a criação desfaz o endereço recém-criado
se o cliente sumir antes do vínculo.
"""
from typing import List, Optional, Union
import logging

from ..core.exceptions import ConflictException, NotFoundException
from ..entidades import Cliente, Endereco
from ..models.endereco import EnderecoAtualizar, EnderecoCriar, EnderecoSubstituir, EnderecoView
from ..repositorios.base import (
    GeradorSequencia, RegistroDuplicadoError, RepositorioClientes, RepositorioEnderecos
)

SEQUENCIA = "enderecos"


class EnderecoService:
    def __init__(
        self,
        repositorio_enderecos: RepositorioEnderecos,
        repositorio_clientes: RepositorioClientes,
        gerador_sequencia: GeradorSequencia,
    ):
        self.repositorio_enderecos = repositorio_enderecos
        self.repositorio_clientes = repositorio_clientes
        self.gerador_sequencia = gerador_sequencia

    async def _resolver_cliente(self, referencia: Union[int, str]) -> Cliente:
        """Número é o id sequencial do cliente; texto é o id interno."""
        cliente: Optional[Cliente]
        if isinstance(referencia, int):
            cliente = await self.repositorio_clientes.buscar_por_id(referencia)
        else:
            cliente = await self.repositorio_clientes.buscar_por_mongo_id(referencia)
        if not cliente:
            raise NotFoundException(f"Cliente com ID {referencia} não encontrado.")
        return cliente

    async def _garantir_cliente_sem_endereco(self, cliente: Cliente) -> None:
        existente = await self.repositorio_enderecos.buscar_por_cliente_id(cliente.mongo_id)
        if existente:
            raise ConflictException(f"Cliente com ID {cliente.id} já possui endereço.")

    async def criar_endereco(self, dados: EnderecoCriar) -> EnderecoView:
        cliente = await self._resolver_cliente(dados.cliente_id)
        await self._garantir_cliente_sem_endereco(cliente)

        novo_id = await self.gerador_sequencia.proximo(SEQUENCIA)
        campos = dados.model_dump(exclude={"cliente_id"})
        novo_endereco = Endereco(**campos, cliente_id=cliente.mongo_id, id=novo_id)
        try:
            persistido = await self.repositorio_enderecos.criar(novo_endereco)
        except RegistroDuplicadoError as erro:
            raise ConflictException(f"Cliente com ID {cliente.id} já possui endereço.") from erro

        vinculado = await self.repositorio_clientes.vincular_endereco(cliente.mongo_id, persistido.mongo_id)
        if not vinculado:
            await self.repositorio_enderecos.deletar(persistido.id)
            logging.warning(f"Endereço {persistido.id} desfeito: cliente {cliente.id} não existe mais")
            raise NotFoundException(f"Cliente com ID {cliente.id} não encontrado.")

        logging.info(f"Endereço criado com sucesso: ID {persistido.id} (cliente {cliente.id})")
        return EnderecoView.model_validate(persistido)

    async def buscar_todos_enderecos(self) -> List[EnderecoView]:
        enderecos = await self.repositorio_enderecos.buscar_todos()
        return [EnderecoView.model_validate(e) for e in enderecos]

    async def buscar_endereco_por_id(self, id: int) -> EnderecoView:
        endereco = await self.repositorio_enderecos.buscar_por_id(id)
        if not endereco:
            raise NotFoundException(f"Endereço com ID {id} não encontrado.")
        return EnderecoView.model_validate(endereco)

    async def atualizar_endereco(self, id: int, dados: EnderecoAtualizar) -> EnderecoView:
        alteracoes = dados.model_dump(exclude_unset=True)
        # o dono e os ids nunca mudam por PATCH
        for campo in ("cliente_id", "mongo_id", "id"):
            alteracoes.pop(campo, None)
        for campo in [c for c, v in alteracoes.items() if v is None and c != "complemento"]:
            del alteracoes[campo]

        atualizado = await self.repositorio_enderecos.atualizar(id, alteracoes)
        if not atualizado:
            raise NotFoundException(f"Endereço com ID {id} não encontrado para atualização.")
        logging.info(f"Endereço {id} atualizado parcialmente: {list(alteracoes.keys())}")
        return EnderecoView.model_validate(atualizado)

    async def substituir_endereco(self, id: int, dados: EnderecoSubstituir) -> EnderecoView:
        cliente = await self._resolver_cliente(dados.cliente_id)
        atual = await self.repositorio_enderecos.buscar_por_id(id)
        if not atual:
            raise NotFoundException(f"Endereço com ID {id} não encontrado para substituição.")

        troca_de_dono = atual.cliente_id != cliente.mongo_id
        if troca_de_dono:
            await self._garantir_cliente_sem_endereco(cliente)

        campos = dados.model_dump(exclude={"cliente_id"})
        substituto = Endereco(**campos, cliente_id=cliente.mongo_id, id=id)
        try:
            substituido = await self.repositorio_enderecos.substituir(id, substituto)
        except RegistroDuplicadoError as erro:
            raise ConflictException(f"Cliente com ID {cliente.id} já possui endereço.") from erro
        if not substituido:
            raise NotFoundException(f"Endereço com ID {id} não encontrado para substituição.")

        if troca_de_dono:
            await self.repositorio_clientes.desvincular_endereco(atual.cliente_id)
            await self.repositorio_clientes.vincular_endereco(cliente.mongo_id, substituido.mongo_id)
            logging.info(f"Endereço {id} transferido para o cliente {cliente.id}")

        logging.info(f"Endereço {id} substituído completamente")
        return EnderecoView.model_validate(substituido)

    async def deletar_endereco(self, id: int) -> bool:
        endereco = await self.repositorio_enderecos.buscar_por_id(id)
        if not endereco:
            raise NotFoundException(f"Endereço com ID {id} não encontrado para deleção.")

        deletado = await self.repositorio_enderecos.deletar(id)
        if not deletado:
            raise NotFoundException(f"Endereço com ID {id} não pôde ser deletado.")

        await self.repositorio_clientes.desvincular_endereco(endereco.cliente_id)
        logging.info(f"Endereço {id} removido com sucesso")
        return True
