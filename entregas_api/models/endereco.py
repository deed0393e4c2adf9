# entregas_api/models/endereco.py
from typing import Optional, Union

from pydantic import Field

from .comum import ModeloBase


class EnderecoBase(ModeloBase):
    cep: str = Field(..., min_length=1, max_length=9, description="CEP")
    logradouro: str = Field(..., min_length=1, max_length=200)
    numero: str = Field(..., min_length=1, max_length=20)
    complemento: Optional[str] = Field(None, max_length=100)
    bairro: str = Field(..., min_length=1, max_length=100)
    cidade: str = Field(..., min_length=1, max_length=100)
    estado: str = Field(..., min_length=1, max_length=50)


class EnderecoCriar(EnderecoBase):
    """
    Modelo para criação e substituição de endereço.

    clienteId aceita o id interno do cliente (string) ou o id
    sequencial (número).
    """
    cliente_id: Union[int, str] = Field(..., description="Cliente dono do endereço")


class EnderecoSubstituir(EnderecoCriar):
    pass


class EnderecoAtualizar(ModeloBase):
    """
    Modelo para atualização parcial (PATCH). Não existe clienteId aqui:
    o dono do endereço não muda por PATCH.
    """
    cep: Optional[str] = Field(None, min_length=1, max_length=9)
    logradouro: Optional[str] = Field(None, min_length=1, max_length=200)
    numero: Optional[str] = Field(None, min_length=1, max_length=20)
    complemento: Optional[str] = Field(None, max_length=100)
    bairro: Optional[str] = Field(None, min_length=1, max_length=100)
    cidade: Optional[str] = Field(None, min_length=1, max_length=100)
    estado: Optional[str] = Field(None, min_length=1, max_length=50)


class EnderecoView(EnderecoBase):
    mongo_id: Optional[str] = Field(None, alias="_id", description="ID interno do endereço")
    id: int
    cliente_id: str


class EnderecoAtualizadoResposta(ModeloBase):
    mensagem: str
    endereco: EnderecoView
