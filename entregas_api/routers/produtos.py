# entregas_api/routers/produtos.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ..container import get_produto_service
from ..models.comum import RESPOSTAS_ERRO, ErroResposta, MensagemResposta
from ..models.produto import (
    EstoqueAlteracao, ProdutoAtualizadoResposta, ProdutoAtualizar, ProdutoCriar, ProdutoSubstituir,
    ProdutoView
)
from ..services.produto_service import ProdutoService

router = APIRouter(
    prefix="/produtos",
    tags=["produtos"],
    responses=RESPOSTAS_ERRO,
)

CONFLITO = {409: {"model": ErroResposta, "description": "Já existe um produto com este nome"}}


@router.get(
    "",
    response_model=List[ProdutoView],
    summary="Listar produtos",
    description="Lista produtos com paginação e filtro de itens em estoque",
)
async def buscar_produtos(
    pagina: Optional[int] = Query(None, ge=1, description="Página (começa em 1)"),
    limite: Optional[int] = Query(None, ge=1, le=1000, description="Itens por página"),
    em_estoque: bool = Query(False, alias="emEstoque", description="Somente produtos com estoque > 0"),
    service: ProdutoService = Depends(get_produto_service),
):
    return await service.buscar_todos_produtos(pagina, limite, em_estoque)


@router.get("/{produto_id}", response_model=ProdutoView, summary="Obter produto por ID")
async def buscar_produto_por_id(
    produto_id: int,
    service: ProdutoService = Depends(get_produto_service),
):
    return await service.buscar_produto_por_id(produto_id)


@router.post(
    "",
    response_model=ProdutoView,
    status_code=status.HTTP_201_CREATED,
    summary="Criar produto",
    responses=CONFLITO,
)
async def criar_produto(
    dados: ProdutoCriar,
    service: ProdutoService = Depends(get_produto_service),
):
    return await service.criar_produto(dados)


@router.patch(
    "/{produto_id}",
    response_model=ProdutoAtualizadoResposta,
    summary="Atualizar produto parcialmente",
    responses=CONFLITO,
)
async def atualizar_produto(
    produto_id: int,
    dados: ProdutoAtualizar,
    service: ProdutoService = Depends(get_produto_service),
):
    produto = await service.atualizar_produto(produto_id, dados)
    return ProdutoAtualizadoResposta(mensagem="Produto atualizado com sucesso", produto=produto)


@router.patch(
    "/{produto_id}/estoque",
    response_model=ProdutoAtualizadoResposta,
    summary="Alterar estoque",
    description="Soma a quantidade ao estoque; use valores negativos para baixa",
)
async def alterar_estoque(
    produto_id: int,
    dados: EstoqueAlteracao,
    service: ProdutoService = Depends(get_produto_service),
):
    produto = await service.alterar_estoque(produto_id, dados.quantidade)
    return ProdutoAtualizadoResposta(mensagem="Estoque atualizado com sucesso", produto=produto)


@router.put(
    "/{produto_id}",
    response_model=ProdutoAtualizadoResposta,
    summary="Substituir produto",
    responses=CONFLITO,
)
async def substituir_produto(
    produto_id: int,
    dados: ProdutoSubstituir,
    service: ProdutoService = Depends(get_produto_service),
):
    produto = await service.substituir_produto(produto_id, dados)
    return ProdutoAtualizadoResposta(mensagem="Produto substituído com sucesso", produto=produto)


@router.delete("/{produto_id}", response_model=MensagemResposta, summary="Remover produto")
async def deletar_produto(
    produto_id: int,
    service: ProdutoService = Depends(get_produto_service),
):
    await service.deletar_produto(produto_id)
    return MensagemResposta(mensagem="Produto excluído com sucesso")
