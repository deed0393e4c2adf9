# entregas_api/models/cliente.py
from typing import List, Optional
import re

from pydantic import ConfigDict, Field, field_validator

from .comum import ModeloBase, validar_nome_obrigatorio

EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _validar_email(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not EMAIL_REGEX.match(v):
        raise ValueError("Email inválido")
    return v


class ClienteCriar(ModeloBase):
    """
    Modelo para criação de cliente (POST).

    CONCEITO: Separação de responsabilidades - a senha entra aqui,
    mas nunca aparece no modelo de resposta.
    """
    nome: str = Field(..., min_length=1, max_length=100, description="Nome do cliente")
    email: str = Field(..., description="Email único do cliente")
    senha: str = Field(..., min_length=1, description="Senha de acesso")
    telefone: Optional[str] = Field(None, max_length=30, description="Telefone de contato")

    @field_validator("nome")
    @classmethod
    def validar_nome(cls, v):
        return validar_nome_obrigatorio(v)

    @field_validator("email")
    @classmethod
    def validar_email(cls, v):
        return _validar_email(v)


class ClienteAtualizar(ModeloBase):
    """
    Modelo para atualização parcial (PATCH): todos os campos opcionais.
    """
    nome: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = None
    senha: Optional[str] = Field(None, min_length=1)
    telefone: Optional[str] = Field(None, max_length=30)

    @field_validator("nome")
    @classmethod
    def validar_nome(cls, v):
        return validar_nome_obrigatorio(v)

    @field_validator("email")
    @classmethod
    def validar_email(cls, v):
        return _validar_email(v)


class ClienteSubstituir(ClienteCriar):
    """Modelo para substituição completa (PUT); telefone passa a ser obrigatório."""
    telefone: str = Field(..., max_length=30)


class ClienteView(ModeloBase):
    """
    Modelo de resposta: sem senha e sem o id interno do banco.
    """
    id: int = Field(..., description="ID sequencial do cliente")
    nome: str
    email: str
    telefone: Optional[str] = None
    endereco_id: Optional[str] = Field(None, description="ID interno do endereço vinculado")
    produtos_ids: List[str] = Field(default_factory=list)
    entregas_ids: List[str] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "nome": "Ana Souza",
                "email": "ana@exemplo.com",
                "telefone": "11999990000",
                "enderecoId": None,
                "produtosIds": [],
                "entregasIds": [],
            }
        }
    )


class ClienteAtualizadoResposta(ModeloBase):
    mensagem: str
    cliente: ClienteView
