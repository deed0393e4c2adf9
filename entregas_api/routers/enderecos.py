# entregas_api/routers/enderecos.py
from typing import List

from fastapi import APIRouter, Depends, status

from ..container import get_endereco_service
from ..models.comum import RESPOSTAS_ERRO, ErroResposta, MensagemResposta
from ..models.endereco import (
    EnderecoAtualizadoResposta, EnderecoAtualizar, EnderecoCriar, EnderecoSubstituir, EnderecoView
)
from ..services.endereco_service import EnderecoService

router = APIRouter(
    prefix="/enderecos",
    tags=["enderecos"],
    responses=RESPOSTAS_ERRO,
)

CONFLITO = {409: {"model": ErroResposta, "description": "Cliente já possui endereço"}}


@router.get("", response_model=List[EnderecoView], summary="Listar endereços")
async def buscar_enderecos(service: EnderecoService = Depends(get_endereco_service)):
    return await service.buscar_todos_enderecos()


@router.get("/{endereco_id}", response_model=EnderecoView, summary="Obter endereço por ID")
async def buscar_endereco_por_id(
    endereco_id: int,
    service: EnderecoService = Depends(get_endereco_service),
):
    return await service.buscar_endereco_por_id(endereco_id)


@router.post(
    "",
    response_model=EnderecoView,
    status_code=status.HTTP_201_CREATED,
    summary="Criar endereço para um cliente",
    responses=CONFLITO,
)
async def criar_endereco(
    dados: EnderecoCriar,
    service: EnderecoService = Depends(get_endereco_service),
):
    """
    Cria o endereço e vincula ao cliente.

    REGRA DE NEGÓCIO: cada cliente tem no máximo um endereço.
    """
    return await service.criar_endereco(dados)


@router.patch(
    "/{endereco_id}",
    response_model=EnderecoAtualizadoResposta,
    summary="Atualizar endereço parcialmente",
)
async def atualizar_endereco(
    endereco_id: int,
    dados: EnderecoAtualizar,
    service: EnderecoService = Depends(get_endereco_service),
):
    endereco = await service.atualizar_endereco(endereco_id, dados)
    return EnderecoAtualizadoResposta(mensagem="Endereço atualizado com sucesso", endereco=endereco)


@router.put(
    "/{endereco_id}",
    response_model=EnderecoAtualizadoResposta,
    summary="Substituir endereço",
    responses=CONFLITO,
)
async def substituir_endereco(
    endereco_id: int,
    dados: EnderecoSubstituir,
    service: EnderecoService = Depends(get_endereco_service),
):
    endereco = await service.substituir_endereco(endereco_id, dados)
    return EnderecoAtualizadoResposta(mensagem="Endereço substituído com sucesso", endereco=endereco)


@router.delete("/{endereco_id}", response_model=MensagemResposta, summary="Remover endereço")
async def deletar_endereco(
    endereco_id: int,
    service: EnderecoService = Depends(get_endereco_service),
):
    await service.deletar_endereco(endereco_id)
    return MensagemResposta(mensagem="Endereço deletado com sucesso")
