"""
Fixtures compartilhadas: aplicação com repositórios em memória e
cliente HTTP já autenticado.
"""
import pytest
from fastapi.testclient import TestClient

from entregas_api.container import construir_container_memoria
from entregas_api.core.config import settings
from entregas_api.main import create_app

from auxiliares import cabecalho_basic


@pytest.fixture
def container():
    """Container novo por teste: ids e dados começam do zero."""
    return construir_container_memoria()


@pytest.fixture
def app(container):
    return create_app(container=container)


@pytest.fixture
def client(app):
    """Cliente HTTP com as credenciais válidas do Basic Auth."""
    with TestClient(app, headers=cabecalho_basic(settings.api_usuario, settings.api_senha)) as test_client:
        yield test_client


@pytest.fixture
def anon_client(app):
    """Cliente HTTP sem credenciais."""
    with TestClient(app) as test_client:
        yield test_client
