"""
Serviço de clientes: ids sequenciais, unicidade de email e views sem senha.
"""
from typing import List, Optional
import logging

from ..core.exceptions import ConflictException, NotFoundException
from ..core.security import gerar_hash_senha
from ..entidades import Cliente
from ..models.cliente import ClienteAtualizar, ClienteCriar, ClienteSubstituir, ClienteView
from ..repositorios.base import (
    GeradorSequencia, RegistroDuplicadoError, RepositorioClientes, RepositorioEnderecos
)

SEQUENCIA = "clientes"
MENSAGEM_EMAIL_DUPLICADO = "Email já cadastrado."
LIMITE_PADRAO = 10


class ClienteService:
    def __init__(
        self,
        repositorio_clientes: RepositorioClientes,
        repositorio_enderecos: RepositorioEnderecos,
        gerador_sequencia: GeradorSequencia,
    ):
        self.repositorio_clientes = repositorio_clientes
        self.repositorio_enderecos = repositorio_enderecos
        self.gerador_sequencia = gerador_sequencia

    async def _garantir_email_livre(self, email: str, ignorar_id: Optional[int] = None) -> None:
        existente = await self.repositorio_clientes.buscar_por_email(email)
        if existente and existente.id != ignorar_id:
            raise ConflictException(MENSAGEM_EMAIL_DUPLICADO)

    async def criar_cliente(self, dados: ClienteCriar) -> ClienteView:
        await self._garantir_email_livre(dados.email)
        novo_id = await self.gerador_sequencia.proximo(SEQUENCIA)
        novo_cliente = Cliente(
            nome=dados.nome,
            email=dados.email,
            senha=gerar_hash_senha(dados.senha),
            telefone=dados.telefone or "",
            id=novo_id,
        )
        try:
            persistido = await self.repositorio_clientes.criar(novo_cliente)
        except RegistroDuplicadoError as erro:
            raise ConflictException(MENSAGEM_EMAIL_DUPLICADO) from erro
        logging.info(f"Cliente criado com sucesso: ID {persistido.id}")
        return ClienteView.model_validate(persistido)

    async def buscar_cliente_por_id(self, id: int) -> ClienteView:
        cliente = await self.repositorio_clientes.buscar_por_id(id)
        if not cliente:
            raise NotFoundException(f"Cliente com ID {id} não encontrado.")
        return ClienteView.model_validate(cliente)

    async def buscar_todos_clientes(
        self, pagina: Optional[int] = None, limite: Optional[int] = None
    ) -> List[ClienteView]:
        if pagina is not None and limite is None:
            limite = LIMITE_PADRAO
        clientes = await self.repositorio_clientes.buscar_todos(pagina, limite)
        return [ClienteView.model_validate(c) for c in clientes]

    async def atualizar_cliente(self, id: int, dados: ClienteAtualizar) -> ClienteView:
        alteracoes = dados.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in alteracoes:
            await self._garantir_email_livre(alteracoes["email"], ignorar_id=id)
        if "senha" in alteracoes:
            alteracoes["senha"] = gerar_hash_senha(alteracoes["senha"])
        try:
            atualizado = await self.repositorio_clientes.atualizar(id, alteracoes)
        except RegistroDuplicadoError as erro:
            raise ConflictException(MENSAGEM_EMAIL_DUPLICADO) from erro
        if not atualizado:
            raise NotFoundException(f"Cliente com ID {id} não encontrado para atualização.")
        logging.info(f"Cliente {id} atualizado parcialmente: {list(alteracoes.keys())}")
        return ClienteView.model_validate(atualizado)

    async def substituir_cliente(self, id: int, dados: ClienteSubstituir) -> ClienteView:
        atual = await self.repositorio_clientes.buscar_por_id(id)
        if not atual:
            raise NotFoundException(f"Cliente com ID {id} não encontrado para substituição.")
        await self._garantir_email_livre(dados.email, ignorar_id=id)

        # vínculos não fazem parte do conteúdo substituído
        substituto = Cliente(
            nome=dados.nome,
            email=dados.email,
            senha=gerar_hash_senha(dados.senha),
            telefone=dados.telefone,
            id=id,
            endereco_id=atual.endereco_id,
            produtos_ids=atual.produtos_ids,
            entregas_ids=atual.entregas_ids,
        )
        try:
            substituido = await self.repositorio_clientes.substituir(id, substituto)
        except RegistroDuplicadoError as erro:
            raise ConflictException(MENSAGEM_EMAIL_DUPLICADO) from erro
        if not substituido:
            raise NotFoundException(f"Cliente com ID {id} não encontrado para substituição.")
        logging.info(f"Cliente {id} substituído completamente")
        return ClienteView.model_validate(substituido)

    async def deletar_cliente(self, id: int) -> bool:
        cliente = await self.repositorio_clientes.buscar_por_id(id)
        if not cliente:
            raise NotFoundException(f"Cliente com ID {id} não encontrado para deleção.")
        deletado = await self.repositorio_clientes.deletar(id)
        if not deletado:
            raise NotFoundException(f"Cliente com ID {id} não encontrado para deleção.")
        if await self.repositorio_enderecos.deletar_por_cliente_id(cliente.mongo_id):
            logging.info(f"Endereço do cliente {id} removido junto com o cliente")
        logging.info(f"Cliente {id} removido com sucesso")
        return True
