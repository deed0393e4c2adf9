# tests/test_repositorios_mongo.py
"""
Testes dos repositórios MongoDB com coleções simuladas: verificam o
mapeamento de documentos e os filtros enviados ao driver.
"""
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from entregas_api.entidades import Cliente, StatusEntrega
from entregas_api.repositorios.base import RegistroDuplicadoError
from entregas_api.repositorios.mongo import (
    GeradorSequenciaMongo, RepositorioClientesMongo, RepositorioEntregasMongo, RepositorioProdutosMongo
)


def _db_com(**colecoes):
    db = MagicMock()
    db.__getitem__.side_effect = lambda nome: colecoes[nome]
    return db


def _colecao():
    colecao = MagicMock()
    colecao.find_one = AsyncMock()
    colecao.find_one_and_update = AsyncMock()
    colecao.find_one_and_replace = AsyncMock()
    colecao.insert_one = AsyncMock()
    colecao.update_one = AsyncMock()
    colecao.delete_one = AsyncMock()
    colecao.create_index = AsyncMock()
    return colecao


def _cursor(documentos):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.__aiter__.return_value = documentos
    return cursor


class TestMapeamentoDocumentos:

    def test_cliente_para_documento_e_de_volta(self):
        repositorio = RepositorioClientesMongo(_db_com(clientes=_colecao()))
        endereco_id = str(ObjectId())
        cliente = Cliente(nome="Ana", email="ana@ex.com", senha="hash", id=3, endereco_id=endereco_id)

        documento = repositorio._para_documento(cliente)

        assert documento["enderecoId"] == ObjectId(endereco_id)
        assert documento["produtosIds"] == []
        assert "mongo_id" not in documento

        documento["_id"] = ObjectId()
        entidade = repositorio._para_entidade(documento)
        assert entidade.endereco_id == endereco_id
        assert entidade.mongo_id == str(documento["_id"])

    def test_entrega_status_gravado_como_texto(self):
        repositorio = RepositorioEntregasMongo(_db_com(entregas=_colecao()))

        alteracoes = repositorio._para_set({"status": StatusEntrega.EM_TRANSITO, "id": 99})

        assert alteracoes == {"status": "EM_TRANSITO"}


class TestRepositorioMongo:

    @pytest.mark.asyncio
    async def test_criar_indices_unicos(self):
        colecao = _colecao()
        repositorio = RepositorioProdutosMongo(_db_com(produtos=colecao))

        await repositorio.criar_indices()

        colecao.create_index.assert_any_await("id", unique=True)
        colecao.create_index.assert_any_await("nome", unique=True)

    @pytest.mark.asyncio
    async def test_duplicidade_vira_registro_duplicado(self):
        colecao = _colecao()
        colecao.insert_one.side_effect = DuplicateKeyError(
            "E11000", 11000, {"keyPattern": {"email": 1}}
        )
        repositorio = RepositorioClientesMongo(_db_com(clientes=colecao))

        with pytest.raises(RegistroDuplicadoError) as excinfo:
            await repositorio.criar(Cliente(nome="Ana", email="ana@ex.com", senha="h", id=1))

        assert excinfo.value.campo == "email"

    @pytest.mark.asyncio
    async def test_atualizar_ignora_campos_protegidos(self):
        colecao = _colecao()
        colecao.find_one_and_update.return_value = {
            "_id": ObjectId(), "id": 1, "nome": "Ana", "email": "novo@ex.com", "senha": "h",
        }
        repositorio = RepositorioClientesMongo(_db_com(clientes=colecao))

        atualizado = await repositorio.atualizar(1, {"email": "novo@ex.com", "endereco_id": "x", "id": 5})

        colecao.find_one_and_update.assert_awaited_once_with(
            {"id": 1}, {"$set": {"email": "novo@ex.com"}}, return_document=ReturnDocument.AFTER
        )
        assert atualizado.email == "novo@ex.com"

    @pytest.mark.asyncio
    async def test_baixa_de_estoque_condicional(self):
        """
        A baixa só casa com documentos que ainda têm estoque suficiente.
        """
        colecao = _colecao()
        colecao.find_one_and_update.return_value = None
        repositorio = RepositorioProdutosMongo(_db_com(produtos=colecao))

        resultado = await repositorio.atualizar_estoque(4, -3)

        assert resultado is None
        colecao.find_one_and_update.assert_awaited_once_with(
            {"id": 4, "estoque": {"$gte": 3}},
            {"$inc": {"estoque": -3}},
            return_document=ReturnDocument.AFTER,
        )

    @pytest.mark.asyncio
    async def test_listagem_paginada_ordenada_por_id(self):
        colecao = _colecao()
        cursor = _cursor([
            {"_id": ObjectId(), "id": 3, "nome": "C", "preco": 1.0, "estoque": 2},
        ])
        colecao.find.return_value = cursor
        repositorio = RepositorioProdutosMongo(_db_com(produtos=colecao))

        produtos = await repositorio.buscar_produtos_em_estoque(pagina=2, limite=2)

        colecao.find.assert_called_once_with({"estoque": {"$gt": 0}})
        cursor.sort.assert_called_once_with("id", 1)
        cursor.skip.assert_called_once_with(2)
        cursor.limit.assert_called_once_with(2)
        assert [p.nome for p in produtos] == ["C"]

    @pytest.mark.asyncio
    async def test_status_com_data_real(self):
        colecao = _colecao()
        colecao.find_one_and_update.return_value = None
        repositorio = RepositorioEntregasMongo(_db_com(entregas=colecao))
        quando = datetime(2025, 12, 2, tzinfo=timezone.utc)

        await repositorio.atualizar_status(1, StatusEntrega.ENTREGUE, quando)

        colecao.find_one_and_update.assert_awaited_once_with(
            {"id": 1},
            {"$set": {"status": "ENTREGUE", "dataEntregaReal": quando}},
            return_document=ReturnDocument.AFTER,
        )


class TestGeradorSequenciaMongo:

    @pytest.mark.asyncio
    async def test_alinha_com_maior_id_existente(self):
        """
        Bases antigas: o contador parte do maior id já gravado.
        """
        contadores = _colecao()
        contadores.find_one_and_update.side_effect = [{"_id": "produtos", "valor": 8}, {"_id": "produtos", "valor": 9}]
        produtos = _colecao()
        produtos.find_one.return_value = {"id": 7}
        gerador = GeradorSequenciaMongo(_db_com(contadores=contadores, produtos=produtos))

        primeiro = await gerador.proximo("produtos")
        segundo = await gerador.proximo("produtos")

        assert (primeiro, segundo) == (8, 9)
        contadores.update_one.assert_awaited_once_with(
            {"_id": "produtos"}, {"$max": {"valor": 7}}, upsert=True
        )
