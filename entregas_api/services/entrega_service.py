"""
Serviço de entregas: valida endereço e produtos referenciados e bloqueia
edição de entregas finalizadas (ENTREGUE ou CANCELADA).

A troca de status tem operação própria e não é bloqueada pelo status atual.
"""
from datetime import datetime, timezone
from typing import Iterable, List, Optional
import logging

from ..core.exceptions import BadRequestException, NotFoundException
from ..entidades import Entrega, StatusEntrega
from ..models.entrega import EntregaAtualizar, EntregaCriar, EntregaSubstituir, EntregaView
from ..repositorios.base import (
    GeradorSequencia, RepositorioEnderecos, RepositorioEntregas, RepositorioProdutos
)

SEQUENCIA = "entregas"


class EntregaService:
    def __init__(
        self,
        repositorio_entregas: RepositorioEntregas,
        repositorio_enderecos: RepositorioEnderecos,
        repositorio_produtos: RepositorioProdutos,
        gerador_sequencia: GeradorSequencia,
    ):
        self.repositorio_entregas = repositorio_entregas
        self.repositorio_enderecos = repositorio_enderecos
        self.repositorio_produtos = repositorio_produtos
        self.gerador_sequencia = gerador_sequencia

    async def _validar_endereco(self, endereco_id: int) -> None:
        endereco = await self.repositorio_enderecos.buscar_por_id(endereco_id)
        if not endereco:
            raise NotFoundException(f"Endereço de entrega com ID {endereco_id} não encontrado.")

    async def _validar_produtos(self, produtos_ids: Iterable[int]) -> None:
        for produto_id in produtos_ids:
            produto = await self.repositorio_produtos.buscar_por_id(produto_id)
            if not produto:
                raise BadRequestException([f"Produto com ID {produto_id} não encontrado."])

    async def _buscar_existente(self, id: int, acao: str = "") -> Entrega:
        entrega = await self.repositorio_entregas.buscar_por_id(id)
        if not entrega:
            raise NotFoundException(f"Entrega com ID {id} não encontrada{acao}.")
        return entrega

    async def criar_entrega(self, dados: EntregaCriar) -> EntregaView:
        await self._validar_endereco(dados.endereco_entrega_id)
        await self._validar_produtos(dados.produtos_nesta_entrega_ids)

        novo_id = await self.gerador_sequencia.proximo(SEQUENCIA)
        nova_entrega = Entrega(
            endereco_entrega_id=dados.endereco_entrega_id,
            data_prevista=dados.data_prevista,
            valor_frete=dados.valor_frete,
            produtos_nesta_entrega_ids=list(dados.produtos_nesta_entrega_ids),
            status=StatusEntrega.PENDENTE,
            id=novo_id,
        )
        persistida = await self.repositorio_entregas.criar(nova_entrega)
        logging.info(f"Entrega criada com sucesso: ID {persistida.id}")
        return EntregaView.model_validate(persistida)

    async def buscar_entrega_por_id(self, id: int) -> EntregaView:
        return EntregaView.model_validate(await self._buscar_existente(id))

    async def buscar_todas_entregas(self, status: Optional[StatusEntrega] = None) -> List[EntregaView]:
        if status is not None:
            return await self.buscar_por_status(status)
        entregas = await self.repositorio_entregas.buscar_todos()
        return [EntregaView.model_validate(e) for e in entregas]

    async def buscar_por_status(self, status: StatusEntrega) -> List[EntregaView]:
        entregas = await self.repositorio_entregas.buscar_por_status(status)
        return [EntregaView.model_validate(e) for e in entregas]

    async def buscar_por_endereco(self, endereco_id: int) -> List[EntregaView]:
        entregas = await self.repositorio_entregas.buscar_por_endereco_id(endereco_id)
        return [EntregaView.model_validate(e) for e in entregas]

    async def atualizar_entrega(self, id: int, dados: EntregaAtualizar) -> EntregaView:
        atual = await self._buscar_existente(id)
        if atual.finalizada:
            raise BadRequestException(
                [f"Não é possível atualizar a entrega ID {id}, status atual: {atual.status.value}."]
            )

        alteracoes = dados.model_dump(exclude_unset=True)
        for campo in [c for c, v in alteracoes.items() if v is None and c != "data_entrega_real"]:
            del alteracoes[campo]
        alteracoes.pop("endereco_entrega_id", None)
        if "produtos_nesta_entrega_ids" in alteracoes:
            await self._validar_produtos(alteracoes["produtos_nesta_entrega_ids"])

        atualizada = await self.repositorio_entregas.atualizar(id, alteracoes)
        if not atualizada:
            raise NotFoundException(f"Entrega com ID {id} não encontrada.")
        logging.info(f"Entrega {id} atualizada parcialmente: {list(alteracoes.keys())}")
        return EntregaView.model_validate(atualizada)

    async def substituir_entrega(self, id: int, dados: EntregaSubstituir) -> EntregaView:
        atual = await self._buscar_existente(id, " para substituição")
        await self._validar_endereco(dados.endereco_entrega_id)
        await self._validar_produtos(dados.produtos_nesta_entrega_ids)

        # status e data real só mudam pelas operações de status/PATCH
        substituta = Entrega(
            endereco_entrega_id=dados.endereco_entrega_id,
            data_prevista=dados.data_prevista,
            valor_frete=dados.valor_frete,
            produtos_nesta_entrega_ids=list(dados.produtos_nesta_entrega_ids),
            status=atual.status,
            data_entrega_real=atual.data_entrega_real,
            id=id,
        )
        substituida = await self.repositorio_entregas.substituir(id, substituta)
        if not substituida:
            raise NotFoundException(f"Entrega com ID {id} não encontrada para substituição.")
        logging.info(f"Entrega {id} substituída completamente")
        return EntregaView.model_validate(substituida)

    async def atualizar_status_entrega(
        self,
        id: int,
        novo_status: StatusEntrega,
        data_entrega_real: Optional[datetime] = None,
    ) -> EntregaView:
        if novo_status == StatusEntrega.ENTREGUE and data_entrega_real is None:
            atual = await self._buscar_existente(id, " para atualização de status")
            if atual.data_entrega_real is None:
                data_entrega_real = datetime.now(timezone.utc)

        atualizada = await self.repositorio_entregas.atualizar_status(id, novo_status, data_entrega_real)
        if not atualizada:
            raise NotFoundException(f"Entrega com ID {id} não encontrada para atualização de status.")
        logging.info(f"Status da entrega {id} alterado para {atualizada.status.value}")
        return EntregaView.model_validate(atualizada)

    async def deletar_entrega(self, id: int) -> bool:
        deletado = await self.repositorio_entregas.deletar(id)
        if not deletado:
            raise NotFoundException(f"Entrega com ID {id} não encontrada para deleção.")
        logging.info(f"Entrega {id} removida com sucesso")
        return True
