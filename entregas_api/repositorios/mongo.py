"""
Repositórios MongoDB: traduzem documentos das coleções em entidades do domínio.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from entregas_api.entidades import Cliente, Endereco, Entrega, Produto, StatusEntrega
from entregas_api.repositorios.base import (
    GeradorSequencia, RegistroDuplicadoError, RepositorioClientes, RepositorioEnderecos,
    RepositorioEntregas, RepositorioProdutos
)


def _para_object_id(valor: Optional[str]) -> Optional[ObjectId]:
    if valor is None or not ObjectId.is_valid(valor):
        return None
    return ObjectId(valor)


def _campo_duplicado(erro: DuplicateKeyError) -> str:
    padrao = (erro.details or {}).get("keyPattern") or {}
    return next(iter(padrao), "desconhecido")


class _RepositorioMongo:
    nome_colecao: str = ""
    entidade: type = object
    # atributo da entidade -> chave no documento
    campos: Dict[str, str] = {}
    campos_object_id: Tuple[str, ...] = ()
    campos_protegidos: Tuple[str, ...] = ("id", "mongo_id")
    indices_unicos: Tuple[str, ...] = ("id",)

    def __init__(self, db):
        self._colecao = db[self.nome_colecao]

    async def criar_indices(self) -> None:
        for chave in self.indices_unicos:
            await self._colecao.create_index(chave, unique=True)

    def _valor_documento(self, atributo: str, valor: Any) -> Any:
        if atributo in self.campos_object_id:
            return _para_object_id(valor)
        if isinstance(valor, Enum):
            return valor.value
        return valor

    def _para_documento(self, entidade) -> Dict[str, Any]:
        return {
            chave: self._valor_documento(atributo, getattr(entidade, atributo))
            for atributo, chave in self.campos.items()
        }

    def _para_set(self, dados: Dict[str, Any]) -> Dict[str, Any]:
        return {
            self.campos[atributo]: self._valor_documento(atributo, valor)
            for atributo, valor in dados.items()
            if atributo in self.campos and atributo not in self.campos_protegidos
        }

    def _para_entidade(self, documento: Optional[Dict[str, Any]]):
        if documento is None:
            return None
        valores = {}
        for atributo, chave in self.campos.items():
            if chave not in documento:
                continue
            valor = documento[chave]
            if isinstance(valor, ObjectId):
                valor = str(valor)
            elif isinstance(valor, list):
                valor = [str(v) if isinstance(v, ObjectId) else v for v in valor]
            valores[atributo] = valor
        return self.entidade(mongo_id=str(documento["_id"]), **valores)

    async def _buscar(
        self, filtro: Dict[str, Any], pagina: Optional[int] = None, limite: Optional[int] = None
    ) -> List[Any]:
        cursor = self._colecao.find(filtro).sort("id", ASCENDING)
        if limite is not None:
            cursor = cursor.skip(((pagina or 1) - 1) * limite).limit(limite)
        return [self._para_entidade(documento) async for documento in cursor]

    async def buscar_por_id(self, id: int):
        return self._para_entidade(await self._colecao.find_one({"id": id}))

    async def buscar_todos(self, pagina: Optional[int] = None, limite: Optional[int] = None):
        return await self._buscar({}, pagina, limite)

    async def criar(self, entidade):
        documento = self._para_documento(entidade)
        try:
            await self._colecao.insert_one(documento)
        except DuplicateKeyError as erro:
            raise RegistroDuplicadoError(_campo_duplicado(erro)) from erro
        return self._para_entidade(documento)

    async def atualizar(self, id: int, dados: Dict[str, Any]):
        alteracoes = self._para_set(dados)
        if not alteracoes:
            return await self.buscar_por_id(id)
        try:
            documento = await self._colecao.find_one_and_update(
                {"id": id}, {"$set": alteracoes}, return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError as erro:
            raise RegistroDuplicadoError(_campo_duplicado(erro)) from erro
        return self._para_entidade(documento)

    async def substituir(self, id: int, entidade):
        documento = self._para_documento(entidade)
        documento["id"] = id
        try:
            resultado = await self._colecao.find_one_and_replace(
                {"id": id}, documento, return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError as erro:
            raise RegistroDuplicadoError(_campo_duplicado(erro)) from erro
        return self._para_entidade(resultado)

    async def deletar(self, id: int) -> bool:
        resultado = await self._colecao.delete_one({"id": id})
        return resultado.deleted_count == 1


class RepositorioClientesMongo(_RepositorioMongo, RepositorioClientes):
    nome_colecao = "clientes"
    entidade = Cliente
    campos = {
        "id": "id",
        "nome": "nome",
        "email": "email",
        "senha": "senha",
        "telefone": "telefone",
        "endereco_id": "enderecoId",
        "produtos_ids": "produtosIds",
        "entregas_ids": "entregasIds",
    }
    campos_object_id = ("endereco_id",)
    campos_protegidos = ("id", "mongo_id", "endereco_id", "produtos_ids", "entregas_ids")
    indices_unicos = ("id", "email")

    async def buscar_por_mongo_id(self, mongo_id: str) -> Optional[Cliente]:
        object_id = _para_object_id(mongo_id)
        if object_id is None:
            return None
        return self._para_entidade(await self._colecao.find_one({"_id": object_id}))

    async def buscar_por_email(self, email: str) -> Optional[Cliente]:
        return self._para_entidade(await self._colecao.find_one({"email": email}))

    async def vincular_endereco(self, cliente_mongo_id: str, endereco_mongo_id: str) -> Optional[Cliente]:
        object_id = _para_object_id(cliente_mongo_id)
        if object_id is None:
            return None
        documento = await self._colecao.find_one_and_update(
            {"_id": object_id},
            {"$set": {"enderecoId": _para_object_id(endereco_mongo_id)}},
            return_document=ReturnDocument.AFTER,
        )
        return self._para_entidade(documento)

    async def desvincular_endereco(self, cliente_mongo_id: str) -> Optional[Cliente]:
        object_id = _para_object_id(cliente_mongo_id)
        if object_id is None:
            return None
        documento = await self._colecao.find_one_and_update(
            {"_id": object_id},
            {"$unset": {"enderecoId": 1}},
            return_document=ReturnDocument.AFTER,
        )
        return self._para_entidade(documento)


class RepositorioEnderecosMongo(_RepositorioMongo, RepositorioEnderecos):
    nome_colecao = "enderecos"
    entidade = Endereco
    campos = {
        "id": "id",
        "cep": "cep",
        "logradouro": "logradouro",
        "numero": "numero",
        "complemento": "complemento",
        "bairro": "bairro",
        "cidade": "cidade",
        "estado": "estado",
        "cliente_id": "clienteId",
    }
    campos_object_id = ("cliente_id",)
    campos_protegidos = ("id", "mongo_id", "cliente_id")
    indices_unicos = ("id", "clienteId")

    async def buscar_por_cliente_id(self, cliente_mongo_id: str) -> Optional[Endereco]:
        object_id = _para_object_id(cliente_mongo_id)
        if object_id is None:
            return None
        return self._para_entidade(await self._colecao.find_one({"clienteId": object_id}))

    async def deletar_por_cliente_id(self, cliente_mongo_id: str) -> bool:
        object_id = _para_object_id(cliente_mongo_id)
        if object_id is None:
            return False
        resultado = await self._colecao.delete_many({"clienteId": object_id})
        return resultado.deleted_count > 0


class RepositorioProdutosMongo(_RepositorioMongo, RepositorioProdutos):
    nome_colecao = "produtos"
    entidade = Produto
    campos = {
        "id": "id",
        "nome": "nome",
        "descricao": "descricao",
        "preco": "preco",
        "estoque": "estoque",
    }
    indices_unicos = ("id", "nome")

    async def buscar_por_nome(self, nome: str) -> Optional[Produto]:
        return self._para_entidade(await self._colecao.find_one({"nome": nome}))

    async def buscar_produtos_em_estoque(
        self, pagina: Optional[int] = None, limite: Optional[int] = None
    ) -> List[Produto]:
        return await self._buscar({"estoque": {"$gt": 0}}, pagina, limite)

    async def atualizar_estoque(self, id: int, quantidade: int) -> Optional[Produto]:
        filtro: Dict[str, Any] = {"id": id}
        if quantidade < 0:
            filtro["estoque"] = {"$gte": -quantidade}
        documento = await self._colecao.find_one_and_update(
            filtro, {"$inc": {"estoque": quantidade}}, return_document=ReturnDocument.AFTER
        )
        return self._para_entidade(documento)


class RepositorioEntregasMongo(_RepositorioMongo, RepositorioEntregas):
    nome_colecao = "entregas"
    entidade = Entrega
    campos = {
        "id": "id",
        "endereco_entrega_id": "enderecoEntregaId",
        "status": "status",
        "data_prevista": "dataPrevista",
        "data_entrega_real": "dataEntregaReal",
        "valor_frete": "valorFrete",
        "produtos_nesta_entrega_ids": "produtosNestaEntregaIds",
    }

    async def buscar_por_status(self, status: StatusEntrega) -> List[Entrega]:
        return await self._buscar({"status": StatusEntrega(status).value})

    async def buscar_por_endereco_id(self, endereco_id: int) -> List[Entrega]:
        return await self._buscar({"enderecoEntregaId": endereco_id})

    async def atualizar_status(
        self, id: int, status: StatusEntrega, data_entrega_real: Optional[datetime] = None
    ) -> Optional[Entrega]:
        alteracoes: Dict[str, Any] = {"status": StatusEntrega(status).value}
        if data_entrega_real is not None:
            alteracoes["dataEntregaReal"] = data_entrega_real
        documento = await self._colecao.find_one_and_update(
            {"id": id}, {"$set": alteracoes}, return_document=ReturnDocument.AFTER
        )
        return self._para_entidade(documento)


class GeradorSequenciaMongo(GeradorSequencia):
    """
    Contador monotônico por coleção, guardado em `contadores`.

    Na primeira chamada do processo o contador é alinhado ao maior `id`
    já existente na coleção, para bases criadas antes dos contadores.
    """
    def __init__(self, db):
        self._db = db
        self._contadores = db["contadores"]
        self._alinhados = set()

    async def _alinhar(self, nome: str) -> None:
        ultimo = await self._db[nome].find_one({}, sort=[("id", DESCENDING)], projection={"id": 1})
        maior_id = ultimo["id"] if ultimo else 0
        await self._contadores.update_one({"_id": nome}, {"$max": {"valor": maior_id}}, upsert=True)
        self._alinhados.add(nome)

    async def proximo(self, nome: str) -> int:
        if nome not in self._alinhados:
            await self._alinhar(nome)
        documento = await self._contadores.find_one_and_update(
            {"_id": nome},
            {"$inc": {"valor": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return documento["valor"]
