# entregas_api/routers/clientes.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..container import get_cliente_service
from ..models.cliente import (
    ClienteAtualizadoResposta, ClienteAtualizar, ClienteCriar, ClienteSubstituir, ClienteView
)
from ..models.comum import RESPOSTAS_ERRO, ErroResposta, MensagemResposta
from ..services.cliente_service import ClienteService

# CONCEITO: APIRouter para organização modular de rotas
router = APIRouter(
    prefix="/clientes",
    tags=["clientes"],
    responses=RESPOSTAS_ERRO,
)


@router.get(
    "",
    response_model=List[ClienteView],
    summary="Listar clientes",
    description="Lista os clientes, com paginação opcional",
)
async def buscar_clientes(
    pagina: Optional[int] = Query(None, ge=1, description="Página (começa em 1)"),
    limite: Optional[int] = Query(None, ge=1, le=1000, description="Itens por página"),
    service: ClienteService = Depends(get_cliente_service),
):
    return await service.buscar_todos_clientes(pagina, limite)


@router.get(
    "/{cliente_id}",
    response_model=ClienteView,
    summary="Obter cliente por ID",
)
async def buscar_cliente_por_id(
    cliente_id: int,
    service: ClienteService = Depends(get_cliente_service),
):
    return await service.buscar_cliente_por_id(cliente_id)


@router.post(
    "",
    response_model=ClienteView,
    status_code=status.HTTP_201_CREATED,
    summary="Criar um novo cliente",
    responses={409: {"model": ErroResposta, "description": "Email já cadastrado"}},
)
async def criar_cliente(
    dados: ClienteCriar,
    service: ClienteService = Depends(get_cliente_service),
):
    """Cria um cliente; a senha é guardada com hash e nunca retorna."""
    return await service.criar_cliente(dados)


@router.patch(
    "/{cliente_id}",
    response_model=ClienteAtualizadoResposta,
    summary="Atualizar cliente parcialmente",
    responses={409: {"model": ErroResposta, "description": "Email já cadastrado"}},
)
async def atualizar_cliente_parcial(
    cliente_id: int,
    dados: ClienteAtualizar,
    service: ClienteService = Depends(get_cliente_service),
):
    cliente = await service.atualizar_cliente(cliente_id, dados)
    return ClienteAtualizadoResposta(mensagem="Cliente atualizado com sucesso", cliente=cliente)


@router.put(
    "/{cliente_id}",
    response_model=ClienteAtualizadoResposta,
    summary="Substituir cliente",
    responses={409: {"model": ErroResposta, "description": "Email já cadastrado"}},
)
async def substituir_cliente(
    cliente_id: int,
    dados: ClienteSubstituir,
    service: ClienteService = Depends(get_cliente_service),
):
    cliente = await service.substituir_cliente(cliente_id, dados)
    return ClienteAtualizadoResposta(mensagem="Cliente substituído com sucesso", cliente=cliente)


@router.delete(
    "/{cliente_id}",
    response_model=MensagemResposta,
    summary="Remover cliente",
    description="Remove o cliente e o endereço vinculado a ele",
)
async def deletar_cliente(
    cliente_id: int,
    service: ClienteService = Depends(get_cliente_service),
):
    await service.deletar_cliente(cliente_id)
    return MensagemResposta(mensagem="Cliente excluído com sucesso")
