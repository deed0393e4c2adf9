"""
Raiz de composição: monta repositórios e serviços por construtor.

A aplicação guarda o Container em `app.state.container`; os routers
recebem os serviços pelas dependências `get_*_service`.
"""
from dataclasses import dataclass

from fastapi import Request

from .repositorios.base import (
    GeradorSequencia, RepositorioClientes, RepositorioEnderecos, RepositorioEntregas, RepositorioProdutos
)
from .repositorios.memoria import (
    GeradorSequenciaMemoria, RepositorioClientesMemoria, RepositorioEnderecosMemoria,
    RepositorioEntregasMemoria, RepositorioProdutosMemoria
)
from .repositorios.mongo import (
    GeradorSequenciaMongo, RepositorioClientesMongo, RepositorioEnderecosMongo,
    RepositorioEntregasMongo, RepositorioProdutosMongo
)
from .services.cliente_service import ClienteService
from .services.endereco_service import EnderecoService
from .services.entrega_service import EntregaService
from .services.produto_service import ProdutoService


@dataclass
class Container:
    cliente_service: ClienteService
    endereco_service: EnderecoService
    produto_service: ProdutoService
    entrega_service: EntregaService


def construir_container(
    repositorio_clientes: RepositorioClientes,
    repositorio_enderecos: RepositorioEnderecos,
    repositorio_produtos: RepositorioProdutos,
    repositorio_entregas: RepositorioEntregas,
    gerador_sequencia: GeradorSequencia,
) -> Container:
    return Container(
        cliente_service=ClienteService(repositorio_clientes, repositorio_enderecos, gerador_sequencia),
        endereco_service=EnderecoService(repositorio_enderecos, repositorio_clientes, gerador_sequencia),
        produto_service=ProdutoService(repositorio_produtos, gerador_sequencia),
        entrega_service=EntregaService(
            repositorio_entregas, repositorio_enderecos, repositorio_produtos, gerador_sequencia
        ),
    )


def construir_container_memoria() -> Container:
    return construir_container(
        RepositorioClientesMemoria(),
        RepositorioEnderecosMemoria(),
        RepositorioProdutosMemoria(),
        RepositorioEntregasMemoria(),
        GeradorSequenciaMemoria(),
    )


async def construir_container_mongo(db) -> Container:
    """Cria os repositórios MongoDB e garante os índices únicos."""
    repositorios = (
        RepositorioClientesMongo(db),
        RepositorioEnderecosMongo(db),
        RepositorioProdutosMongo(db),
        RepositorioEntregasMongo(db),
    )
    for repositorio in repositorios:
        await repositorio.criar_indices()
    return construir_container(*repositorios, GeradorSequenciaMongo(db))


# Dependências injetadas nos routers
def get_cliente_service(request: Request) -> ClienteService:
    return request.app.state.container.cliente_service


def get_endereco_service(request: Request) -> EnderecoService:
    return request.app.state.container.endereco_service


def get_produto_service(request: Request) -> ProdutoService:
    return request.app.state.container.produto_service


def get_entrega_service(request: Request) -> EntregaService:
    return request.app.state.container.entrega_service
