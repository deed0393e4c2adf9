# entregas_api/models/produto.py
from typing import Optional

from pydantic import ConfigDict, Field, field_validator

from .comum import ModeloBase, validar_nome_obrigatorio


class ProdutoBase(ModeloBase):
    nome: str = Field(..., min_length=1, max_length=200, description="Nome único do produto")
    descricao: Optional[str] = Field(None, max_length=2000)
    preco: float = Field(..., ge=0, description="Preço unitário")
    estoque: int = Field(..., ge=0, description="Quantidade em estoque")

    @field_validator("nome")
    @classmethod
    def validar_nome(cls, v):
        return validar_nome_obrigatorio(v)


class ProdutoCriar(ProdutoBase):
    pass


class ProdutoSubstituir(ProdutoBase):
    pass


class ProdutoAtualizar(ModeloBase):
    nome: Optional[str] = Field(None, min_length=1, max_length=200)
    descricao: Optional[str] = Field(None, max_length=2000)
    preco: Optional[float] = Field(None, ge=0)
    estoque: Optional[int] = Field(None, ge=0)

    @field_validator("nome")
    @classmethod
    def validar_nome(cls, v):
        return validar_nome_obrigatorio(v)


class EstoqueAlteracao(ModeloBase):
    """Variação de estoque: positiva repõe, negativa baixa."""
    quantidade: int = Field(..., description="Diferente de zero")


class ProdutoView(ProdutoBase):
    id: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "nome": "Notebook Dell",
                "descricao": "Notebook 15 polegadas",
                "preco": 2500.0,
                "estoque": 10,
            }
        }
    )


class ProdutoAtualizadoResposta(ModeloBase):
    mensagem: str
    produto: ProdutoView
