# entregas_api/routers/entregas.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..container import get_entrega_service
from ..entidades import StatusEntrega
from ..models.comum import RESPOSTAS_ERRO, MensagemResposta
from ..models.entrega import (
    EntregaAtualizadaResposta, EntregaAtualizar, EntregaCriar, EntregaSubstituir, EntregaView,
    StatusAlteracao
)
from ..services.entrega_service import EntregaService

router = APIRouter(
    prefix="/entregas",
    tags=["entregas"],
    responses=RESPOSTAS_ERRO,
)


@router.get(
    "",
    response_model=List[EntregaView],
    summary="Listar entregas",
    description="Lista as entregas, opcionalmente filtradas por status",
)
async def buscar_todas_entregas(
    status_filtro: Optional[StatusEntrega] = Query(None, alias="status", description="Filtrar por status"),
    service: EntregaService = Depends(get_entrega_service),
):
    return await service.buscar_todas_entregas(status_filtro)


@router.get(
    "/endereco/{endereco_id}",
    response_model=List[EntregaView],
    summary="Buscar entregas por endereço",
)
async def buscar_por_endereco(
    endereco_id: int,
    service: EntregaService = Depends(get_entrega_service),
):
    return await service.buscar_por_endereco(endereco_id)


@router.get("/{entrega_id}", response_model=EntregaView, summary="Obter entrega por ID")
async def buscar_entrega_por_id(
    entrega_id: int,
    service: EntregaService = Depends(get_entrega_service),
):
    return await service.buscar_entrega_por_id(entrega_id)


@router.post(
    "",
    response_model=EntregaView,
    status_code=status.HTTP_201_CREATED,
    summary="Criar entrega",
)
async def criar_entrega(
    dados: EntregaCriar,
    service: EntregaService = Depends(get_entrega_service),
):
    """
    Cria uma entrega PENDENTE.

    VALIDAÇÕES: o endereço precisa existir (404) e todos os produtos
    listados também (400 com o id ausente).
    """
    return await service.criar_entrega(dados)


@router.patch(
    "/{entrega_id}",
    response_model=EntregaAtualizadaResposta,
    summary="Atualizar entrega parcialmente",
    description="Bloqueado para entregas ENTREGUE ou CANCELADA",
)
async def atualizar_entrega(
    entrega_id: int,
    dados: EntregaAtualizar,
    service: EntregaService = Depends(get_entrega_service),
):
    entrega = await service.atualizar_entrega(entrega_id, dados)
    return EntregaAtualizadaResposta(mensagem="Entrega atualizada com sucesso", entrega=entrega)


@router.put(
    "/{entrega_id}",
    response_model=EntregaAtualizadaResposta,
    summary="Substituir entrega",
)
async def substituir_entrega(
    entrega_id: int,
    dados: EntregaSubstituir,
    service: EntregaService = Depends(get_entrega_service),
):
    entrega = await service.substituir_entrega(entrega_id, dados)
    return EntregaAtualizadaResposta(mensagem="Entrega substituída com sucesso", entrega=entrega)


@router.patch(
    "/{entrega_id}/status",
    response_model=EntregaAtualizadaResposta,
    summary="Atualizar status da entrega",
)
async def atualizar_status(
    entrega_id: int,
    dados: StatusAlteracao,
    service: EntregaService = Depends(get_entrega_service),
):
    entrega = await service.atualizar_status_entrega(entrega_id, dados.status, dados.data_entrega_real)
    return EntregaAtualizadaResposta(mensagem="Status da entrega atualizado", entrega=entrega)


@router.delete("/{entrega_id}", response_model=MensagemResposta, summary="Remover entrega")
async def deletar_entrega(
    entrega_id: int,
    service: EntregaService = Depends(get_entrega_service),
):
    await service.deletar_entrega(entrega_id)
    return MensagemResposta(mensagem="Entrega excluída com sucesso")
