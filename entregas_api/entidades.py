"""
Entidades do domínio: clientes, endereços, produtos e entregas.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class StatusEntrega(str, Enum):
    PENDENTE = "PENDENTE"
    EM_TRANSITO = "EM_TRANSITO"
    ENTREGUE = "ENTREGUE"
    CANCELADA = "CANCELADA"


STATUS_TERMINAIS = (StatusEntrega.ENTREGUE, StatusEntrega.CANCELADA)


@dataclass
class Cliente:
    nome: str
    email: str
    senha: str
    telefone: str = ""
    id: int = 0
    mongo_id: Optional[str] = None
    endereco_id: Optional[str] = None
    produtos_ids: List[str] = field(default_factory=list)
    entregas_ids: List[str] = field(default_factory=list)
    def __post_init__(self):
        if not self.nome or not self.nome.strip():
            raise ValueError("Nome é obrigatório")
        if "@" not in self.email:
            raise ValueError("Email inválido")


@dataclass
class Endereco:
    cep: str
    logradouro: str
    numero: str
    bairro: str
    cidade: str
    estado: str
    cliente_id: str
    complemento: Optional[str] = None
    id: int = 0
    mongo_id: Optional[str] = None
    def __post_init__(self):
        if not self.cliente_id:
            raise ValueError("Endereço precisa pertencer a um cliente")


@dataclass
class Produto:
    nome: str
    preco: float
    estoque: int
    descricao: Optional[str] = None
    id: int = 0
    mongo_id: Optional[str] = None
    def __post_init__(self):
        if self.preco < 0:
            raise ValueError("Preço não pode ser negativo")
        if self.estoque < 0:
            raise ValueError("Estoque não pode ser negativo")
        if not self.nome.strip():
            raise ValueError("Nome é obrigatório")
    def tem_estoque_disponivel(self, quantidade: int) -> bool:
        return self.estoque >= quantidade


@dataclass
class Entrega:
    endereco_entrega_id: int
    data_prevista: datetime
    valor_frete: float
    produtos_nesta_entrega_ids: List[int] = field(default_factory=list)
    status: StatusEntrega = StatusEntrega.PENDENTE
    data_entrega_real: Optional[datetime] = None
    id: int = 0
    mongo_id: Optional[str] = None
    def __post_init__(self):
        self.status = StatusEntrega(self.status)
        if self.valor_frete < 0:
            raise ValueError("Valor do frete não pode ser negativo")
    @property
    def finalizada(self) -> bool:
        return self.status in STATUS_TERMINAIS
