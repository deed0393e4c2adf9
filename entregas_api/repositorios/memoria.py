"""
Repositórios em memória, usados em testes e em execuções locais sem MongoDB.
"""
from copy import deepcopy
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId

from entregas_api.entidades import Cliente, Endereco, Entrega, Produto, StatusEntrega
from entregas_api.repositorios.base import (
    GeradorSequencia, RegistroDuplicadoError, RepositorioClientes, RepositorioEnderecos,
    RepositorioEntregas, RepositorioProdutos, paginar
)


class _RepositorioMemoria:
    campos_unicos: Tuple[str, ...] = ()
    campos_protegidos: Tuple[str, ...] = ("id", "mongo_id")
    def __init__(self):
        self._registros: Dict[int, Any] = {}
    def _verificar_unicidade(self, entidade, ignorar_id: Optional[int] = None) -> None:
        for campo in self.campos_unicos:
            valor = getattr(entidade, campo)
            for existente in self._registros.values():
                if existente.id != ignorar_id and getattr(existente, campo) == valor:
                    raise RegistroDuplicadoError(campo, valor)
    def _filtrar(self, condicao) -> List[Any]:
        return [deepcopy(e) for e in self._registros.values() if condicao(e)]
    async def buscar_por_id(self, id: int):
        entidade = self._registros.get(id)
        return deepcopy(entidade) if entidade else None
    async def buscar_todos(self, pagina: Optional[int] = None, limite: Optional[int] = None):
        return paginar(self._filtrar(lambda e: True), pagina, limite)
    async def criar(self, entidade):
        if entidade.id in self._registros:
            raise RegistroDuplicadoError("id", entidade.id)
        self._verificar_unicidade(entidade)
        novo = replace(entidade, mongo_id=str(ObjectId()))
        self._registros[novo.id] = novo
        return deepcopy(novo)
    async def atualizar(self, id: int, dados: Dict[str, Any]):
        atual = self._registros.get(id)
        if atual is None:
            return None
        permitidos = {k: v for k, v in dados.items() if k not in self.campos_protegidos}
        atualizado = replace(atual, **permitidos)
        self._verificar_unicidade(atualizado, ignorar_id=id)
        self._registros[id] = atualizado
        return deepcopy(atualizado)
    async def substituir(self, id: int, entidade):
        atual = self._registros.get(id)
        if atual is None:
            return None
        substituto = replace(entidade, id=id, mongo_id=atual.mongo_id)
        self._verificar_unicidade(substituto, ignorar_id=id)
        self._registros[id] = substituto
        return deepcopy(substituto)
    async def deletar(self, id: int) -> bool:
        return self._registros.pop(id, None) is not None


class RepositorioClientesMemoria(_RepositorioMemoria, RepositorioClientes):
    campos_unicos = ("email",)
    campos_protegidos = ("id", "mongo_id", "endereco_id", "produtos_ids", "entregas_ids")
    def _por_mongo_id(self, mongo_id: str) -> Optional[Cliente]:
        return next((c for c in self._registros.values() if c.mongo_id == mongo_id), None)
    async def buscar_por_mongo_id(self, mongo_id: str) -> Optional[Cliente]:
        cliente = self._por_mongo_id(mongo_id)
        return deepcopy(cliente) if cliente else None
    async def buscar_por_email(self, email: str) -> Optional[Cliente]:
        encontrados = self._filtrar(lambda c: c.email == email)
        return encontrados[0] if encontrados else None
    async def vincular_endereco(self, cliente_mongo_id: str, endereco_mongo_id: str) -> Optional[Cliente]:
        cliente = self._por_mongo_id(cliente_mongo_id)
        if cliente is None:
            return None
        cliente.endereco_id = endereco_mongo_id
        return deepcopy(cliente)
    async def desvincular_endereco(self, cliente_mongo_id: str) -> Optional[Cliente]:
        cliente = self._por_mongo_id(cliente_mongo_id)
        if cliente is None:
            return None
        cliente.endereco_id = None
        return deepcopy(cliente)


class RepositorioEnderecosMemoria(_RepositorioMemoria, RepositorioEnderecos):
    campos_unicos = ("cliente_id",)
    campos_protegidos = ("id", "mongo_id", "cliente_id")
    async def buscar_por_cliente_id(self, cliente_mongo_id: str) -> Optional[Endereco]:
        encontrados = self._filtrar(lambda e: e.cliente_id == cliente_mongo_id)
        return encontrados[0] if encontrados else None
    async def deletar_por_cliente_id(self, cliente_mongo_id: str) -> bool:
        ids = [e.id for e in self._registros.values() if e.cliente_id == cliente_mongo_id]
        for id in ids:
            del self._registros[id]
        return len(ids) > 0


class RepositorioProdutosMemoria(_RepositorioMemoria, RepositorioProdutos):
    campos_unicos = ("nome",)
    async def buscar_por_nome(self, nome: str) -> Optional[Produto]:
        encontrados = self._filtrar(lambda p: p.nome == nome)
        return encontrados[0] if encontrados else None
    async def buscar_produtos_em_estoque(
        self, pagina: Optional[int] = None, limite: Optional[int] = None
    ) -> List[Produto]:
        return paginar(self._filtrar(lambda p: p.estoque > 0), pagina, limite)
    async def atualizar_estoque(self, id: int, quantidade: int) -> Optional[Produto]:
        produto = self._registros.get(id)
        if produto is None or produto.estoque + quantidade < 0:
            return None
        produto.estoque += quantidade
        return deepcopy(produto)


class RepositorioEntregasMemoria(_RepositorioMemoria, RepositorioEntregas):
    async def buscar_por_status(self, status: StatusEntrega) -> List[Entrega]:
        return self._filtrar(lambda e: e.status == status)
    async def buscar_por_endereco_id(self, endereco_id: int) -> List[Entrega]:
        return self._filtrar(lambda e: e.endereco_entrega_id == endereco_id)
    async def atualizar_status(
        self, id: int, status: StatusEntrega, data_entrega_real: Optional[datetime] = None
    ) -> Optional[Entrega]:
        entrega = self._registros.get(id)
        if entrega is None:
            return None
        entrega.status = StatusEntrega(status)
        if data_entrega_real is not None:
            entrega.data_entrega_real = data_entrega_real
        return deepcopy(entrega)


class GeradorSequenciaMemoria(GeradorSequencia):
    def __init__(self):
        self._contadores: Dict[str, int] = {}
    async def proximo(self, nome: str) -> int:
        self._contadores[nome] = self._contadores.get(nome, 0) + 1
        return self._contadores[nome]
