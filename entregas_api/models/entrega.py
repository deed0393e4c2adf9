# entregas_api/models/entrega.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from ..entidades import StatusEntrega
from .comum import ModeloBase


class EntregaCriar(ModeloBase):
    """
    Modelo para criação e substituição de entrega.

    O status não entra aqui: toda entrega nasce PENDENTE.
    """
    endereco_entrega_id: int = Field(..., gt=0, description="ID sequencial do endereço")
    data_prevista: datetime = Field(..., description="Data prevista (ISO 8601)")
    valor_frete: float = Field(..., gt=0)
    produtos_nesta_entrega_ids: List[int] = Field(..., min_length=1)


class EntregaSubstituir(EntregaCriar):
    pass


class EntregaAtualizar(ModeloBase):
    """PATCH: o endereço de entrega não pode ser trocado."""
    status: Optional[StatusEntrega] = None
    data_prevista: Optional[datetime] = None
    data_entrega_real: Optional[datetime] = None
    valor_frete: Optional[float] = Field(None, gt=0)
    produtos_nesta_entrega_ids: Optional[List[int]] = Field(None, min_length=1)


class StatusAlteracao(ModeloBase):
    status: StatusEntrega
    data_entrega_real: Optional[datetime] = None


class EntregaView(ModeloBase):
    id: int
    endereco_entrega_id: int
    status: StatusEntrega
    data_prevista: datetime
    data_entrega_real: Optional[datetime] = None
    valor_frete: float
    produtos_nesta_entrega_ids: List[int]


class EntregaAtualizadaResposta(ModeloBase):
    mensagem: str
    entrega: EntregaView
