# entregas_api/models/comum.py
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ModeloBase(BaseModel):
    """
    Base de todos os modelos da API.

    CONCEITO: Atributos em snake_case no Python, JSON em camelCase
    (enderecoEntregaId, dataPrevista...). `from_attributes` permite montar
    as views direto das entidades do domínio.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def validar_nome_obrigatorio(v: Optional[str]) -> Optional[str]:
    """Nome só com espaços é rejeitado; o valor segue sem espaços nas pontas."""
    if v is None:
        return v
    if not v.strip():
        raise ValueError("Nome é obrigatório")
    return v.strip()


class MensagemResposta(ModeloBase):
    mensagem: str


class ErroResposta(BaseModel):
    """Formato único das respostas de erro."""
    status: int = Field(..., description="Status HTTP")
    message: str = Field(..., description="Mensagem principal do erro")
    errors: List[str] = Field(default_factory=list, description="Detalhes do erro")
    timestamp: str
    path: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": 404,
                "message": "Cliente com ID 7 não encontrado.",
                "errors": ["Cliente com ID 7 não encontrado."],
                "timestamp": "2025-10-15T15:00:00+00:00",
                "path": "/api/clientes/7",
            }
        }
    )


RESPOSTAS_ERRO = {
    400: {"model": ErroResposta, "description": "Dados inválidos"},
    401: {"model": ErroResposta, "description": "Credenciais ausentes ou inválidas"},
    404: {"model": ErroResposta, "description": "Recurso não encontrado"},
}
