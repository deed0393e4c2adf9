"""
Serviço de produtos: catálogo com nome único e controle de estoque.
"""
from typing import List, Optional
import logging

from ..core.exceptions import BadRequestException, ConflictException, NotFoundException
from ..entidades import Produto
from ..models.produto import ProdutoAtualizar, ProdutoCriar, ProdutoSubstituir, ProdutoView
from ..repositorios.base import GeradorSequencia, RegistroDuplicadoError, RepositorioProdutos

SEQUENCIA = "produtos"
MENSAGEM_NOME_DUPLICADO = "Já existe um produto com este nome."
LIMITE_PADRAO = 10


class ProdutoService:
    def __init__(self, repositorio_produtos: RepositorioProdutos, gerador_sequencia: GeradorSequencia):
        self.repositorio_produtos = repositorio_produtos
        self.gerador_sequencia = gerador_sequencia

    async def _garantir_nome_livre(self, nome: str, ignorar_id: Optional[int] = None) -> None:
        existente = await self.repositorio_produtos.buscar_por_nome(nome)
        if existente and existente.id != ignorar_id:
            raise ConflictException(MENSAGEM_NOME_DUPLICADO)

    async def criar_produto(self, dados: ProdutoCriar) -> ProdutoView:
        await self._garantir_nome_livre(dados.nome)
        novo_id = await self.gerador_sequencia.proximo(SEQUENCIA)
        novo_produto = Produto(**dados.model_dump(), id=novo_id)
        try:
            persistido = await self.repositorio_produtos.criar(novo_produto)
        except RegistroDuplicadoError as erro:
            raise ConflictException(MENSAGEM_NOME_DUPLICADO) from erro
        logging.info(f"Produto criado com sucesso: ID {persistido.id}")
        return ProdutoView.model_validate(persistido)

    async def buscar_produto_por_id(self, id: int) -> ProdutoView:
        produto = await self.repositorio_produtos.buscar_por_id(id)
        if not produto:
            raise NotFoundException(f"Produto com ID {id} não encontrado.")
        return ProdutoView.model_validate(produto)

    async def buscar_todos_produtos(
        self,
        pagina: Optional[int] = None,
        limite: Optional[int] = None,
        em_estoque: bool = False,
    ) -> List[ProdutoView]:
        """
        Lista produtos com paginação opcional.

        Página sem limite usa LIMITE_PADRAO; limite sem página começa na 1.
        """
        if pagina is not None and limite is None:
            limite = LIMITE_PADRAO
        if em_estoque:
            return await self.buscar_produtos_em_estoque(pagina, limite)
        produtos = await self.repositorio_produtos.buscar_todos(pagina, limite)
        return [ProdutoView.model_validate(p) for p in produtos]

    async def buscar_produtos_em_estoque(
        self, pagina: Optional[int] = None, limite: Optional[int] = None
    ) -> List[ProdutoView]:
        """Produtos com estoque > 0."""
        produtos = await self.repositorio_produtos.buscar_produtos_em_estoque(pagina, limite)
        return [ProdutoView.model_validate(p) for p in produtos]

    async def atualizar_produto(self, id: int, dados: ProdutoAtualizar) -> ProdutoView:
        alteracoes = dados.model_dump(exclude_unset=True)
        for campo in [c for c, v in alteracoes.items() if v is None and c != "descricao"]:
            del alteracoes[campo]
        if "nome" in alteracoes:
            await self._garantir_nome_livre(alteracoes["nome"], ignorar_id=id)
        try:
            atualizado = await self.repositorio_produtos.atualizar(id, alteracoes)
        except RegistroDuplicadoError as erro:
            raise ConflictException(MENSAGEM_NOME_DUPLICADO) from erro
        if not atualizado:
            raise NotFoundException(f"Produto com ID {id} não encontrado para atualização.")
        logging.info(f"Produto {id} atualizado parcialmente: {list(alteracoes.keys())}")
        return ProdutoView.model_validate(atualizado)

    async def substituir_produto(self, id: int, dados: ProdutoSubstituir) -> ProdutoView:
        await self._garantir_nome_livre(dados.nome, ignorar_id=id)
        substituto = Produto(**dados.model_dump(), id=id)
        try:
            substituido = await self.repositorio_produtos.substituir(id, substituto)
        except RegistroDuplicadoError as erro:
            raise ConflictException(MENSAGEM_NOME_DUPLICADO) from erro
        if not substituido:
            raise NotFoundException(f"Produto com ID {id} não encontrado para substituição.")
        logging.info(f"Produto {id} substituído completamente")
        return ProdutoView.model_validate(substituido)

    async def deletar_produto(self, id: int) -> bool:
        deletado = await self.repositorio_produtos.deletar(id)
        if not deletado:
            raise NotFoundException(f"Produto com ID {id} não encontrado para deleção.")
        logging.info(f"Produto {id} removido com sucesso")
        return True

    async def alterar_estoque(self, id: int, quantidade: int) -> ProdutoView:
        """
        Soma `quantidade` ao estoque (negativa para baixa).

        A checagem prévia dá a mensagem de erro; a guarda do repositório
        garante que duas baixas simultâneas não deixem o estoque negativo.
        """
        if quantidade == 0:
            raise BadRequestException(["Quantidade deve ser diferente de zero."])

        if quantidade < 0:
            atual = await self.repositorio_produtos.buscar_por_id(id)
            if not atual:
                raise NotFoundException(f"Produto com ID {id} não encontrado.")
            if not atual.tem_estoque_disponivel(-quantidade):
                raise BadRequestException(["Estoque insuficiente."])

        atualizado = await self.repositorio_produtos.atualizar_estoque(id, quantidade)
        if not atualizado:
            if quantidade < 0 and await self.repositorio_produtos.buscar_por_id(id):
                raise BadRequestException(["Estoque insuficiente."])
            raise NotFoundException(f"Produto com ID {id} não encontrado.")
        logging.info(f"Estoque do produto {id} alterado em {quantidade}: agora {atualizado.estoque}")
        return ProdutoView.model_validate(atualizado)
