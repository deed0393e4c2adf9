"""
Repositórios: interfaces de persistência usadas pelos serviços.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from entregas_api.entidades import Cliente, Endereco, Entrega, Produto, StatusEntrega

T = TypeVar("T")


class RegistroDuplicadoError(Exception):
    """Violação de unicidade detectada pela camada de persistência."""
    def __init__(self, campo: str, valor: Any = None):
        self.campo = campo
        self.valor = valor
        super().__init__(f"Valor duplicado para o campo '{campo}'")


def paginar(itens: List[T], pagina: Optional[int], limite: Optional[int]) -> List[T]:
    if limite is None:
        return itens
    inicio = ((pagina or 1) - 1) * limite
    return itens[inicio:inicio + limite]


class RepositorioBase(ABC, Generic[T]):
    @abstractmethod
    async def buscar_por_id(self, id: int) -> Optional[T]:
        pass
    @abstractmethod
    async def buscar_todos(self, pagina: Optional[int] = None, limite: Optional[int] = None) -> List[T]:
        pass
    @abstractmethod
    async def criar(self, entidade: T) -> T:
        pass
    @abstractmethod
    async def atualizar(self, id: int, dados: Dict[str, Any]) -> Optional[T]:
        pass
    @abstractmethod
    async def substituir(self, id: int, entidade: T) -> Optional[T]:
        pass
    @abstractmethod
    async def deletar(self, id: int) -> bool:
        pass


class RepositorioClientes(RepositorioBase[Cliente]):
    @abstractmethod
    async def buscar_por_mongo_id(self, mongo_id: str) -> Optional[Cliente]:
        pass
    @abstractmethod
    async def buscar_por_email(self, email: str) -> Optional[Cliente]:
        pass
    @abstractmethod
    async def vincular_endereco(self, cliente_mongo_id: str, endereco_mongo_id: str) -> Optional[Cliente]:
        pass
    @abstractmethod
    async def desvincular_endereco(self, cliente_mongo_id: str) -> Optional[Cliente]:
        pass


class RepositorioEnderecos(RepositorioBase[Endereco]):
    @abstractmethod
    async def buscar_por_cliente_id(self, cliente_mongo_id: str) -> Optional[Endereco]:
        pass
    @abstractmethod
    async def deletar_por_cliente_id(self, cliente_mongo_id: str) -> bool:
        pass


class RepositorioProdutos(RepositorioBase[Produto]):
    @abstractmethod
    async def buscar_por_nome(self, nome: str) -> Optional[Produto]:
        pass
    @abstractmethod
    async def buscar_produtos_em_estoque(
        self, pagina: Optional[int] = None, limite: Optional[int] = None
    ) -> List[Produto]:
        pass
    @abstractmethod
    async def atualizar_estoque(self, id: int, quantidade: int) -> Optional[Produto]:
        """Incrementa o estoque sem deixá-lo negativo; None se o produto não existe ou faltaria estoque."""
        pass


class RepositorioEntregas(RepositorioBase[Entrega]):
    @abstractmethod
    async def buscar_por_status(self, status: StatusEntrega) -> List[Entrega]:
        pass
    @abstractmethod
    async def buscar_por_endereco_id(self, endereco_id: int) -> List[Entrega]:
        pass
    @abstractmethod
    async def atualizar_status(
        self, id: int, status: StatusEntrega, data_entrega_real: Optional[datetime] = None
    ) -> Optional[Entrega]:
        pass


class GeradorSequencia(ABC):
    @abstractmethod
    async def proximo(self, nome: str) -> int:
        pass
