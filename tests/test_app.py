# tests/test_app.py
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import PyMongoError

from entregas_api import main
from entregas_api.container import Container
from entregas_api.core.config import settings
from entregas_api.core.exceptions import MENSAGEM_ERRO_INTERNO

from auxiliares import cabecalho_basic


class TestAutenticacao:
    """
    TESTES DE SEGURANÇA: Basic Auth em todas as rotas de /api.
    """

    def test_sem_credenciais_retorna_401(self, anon_client):
        response = anon_client.get("/api/clientes")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"].startswith("Basic")
        assert response.json()["message"] == "Credenciais de autenticação são necessárias"

    def test_credenciais_invalidas_retorna_401(self, anon_client):
        response = anon_client.get("/api/produtos", headers=cabecalho_basic("intruso", "errada"))

        assert response.status_code == 401
        assert response.json()["message"] == "Acesso não autorizado"

    def test_credenciais_validas(self, anon_client):
        response = anon_client.get(
            "/api/entregas", headers=cabecalho_basic(settings.api_usuario, settings.api_senha)
        )

        assert response.status_code == 200

    def test_rotas_publicas(self, anon_client):
        assert anon_client.get("/health").json()["status"] == "healthy"
        assert anon_client.get("/").status_code == 200
        assert anon_client.get("/openapi.json").status_code == 200


class TestRespostasDeErro:
    """
    TESTES DE PADRONIZAÇÃO: todo erro segue o mesmo envelope.
    """

    def test_envelope_de_erro(self, client):
        response = client.get("/api/clientes/10")

        corpo = response.json()
        assert set(corpo) == {"status", "message", "errors", "timestamp", "path"}
        assert corpo["status"] == 404
        assert corpo["errors"] == [corpo["message"]]
        assert corpo["path"] == "/api/clientes/10"

    def test_rota_inexistente(self, client):
        response = client.get("/api/pedidos")

        assert response.status_code == 404
        assert response.json()["message"] == "Rota não disponível: GET /api/pedidos"

    def test_id_nao_numerico_retorna_400(self, client):
        response = client.get("/api/produtos/abc")

        assert response.status_code == 400

    def test_erro_inesperado_nao_vaza_detalhes(self):
        """
        TESTE DE RESILIÊNCIA: exceção não tratada vira 500 genérico.
        """
        # MOCK: serviço que falha de forma inesperada
        produto_service = MagicMock()
        produto_service.buscar_produto_por_id = AsyncMock(side_effect=RuntimeError("segredo interno"))
        container = Container(MagicMock(), MagicMock(), produto_service, MagicMock())
        app = main.create_app(container=container)

        with TestClient(
            app,
            raise_server_exceptions=False,
            headers=cabecalho_basic(settings.api_usuario, settings.api_senha),
        ) as test_client:
            response = test_client.get("/api/produtos/1")

        assert response.status_code == 500
        assert response.json()["message"] == MENSAGEM_ERRO_INTERNO
        assert "segredo" not in response.text

    def test_erro_de_banco_vira_500(self):
        entrega_service = MagicMock()
        entrega_service.buscar_todas_entregas = AsyncMock(side_effect=PyMongoError("conexão perdida"))
        container = Container(MagicMock(), MagicMock(), MagicMock(), entrega_service)
        app = main.create_app(container=container)

        with TestClient(app, headers=cabecalho_basic(settings.api_usuario, settings.api_senha)) as test_client:
            response = test_client.get("/api/entregas")

        assert response.status_code == 500
        assert response.json()["message"] == MENSAGEM_ERRO_INTERNO


class TestObservabilidade:

    def test_headers_de_rastreamento(self, client):
        response = client.get("/health")

        assert "X-Request-ID" in response.headers
        assert "X-Process-Time" in response.headers

    def test_metricas_prometheus(self, client):
        client.get("/api/clientes")

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "entregas_api_requests_total" in response.text


class TestInicializacao:

    def test_sem_mongo_uri_encerra_com_status_1(self, monkeypatch):
        monkeypatch.setattr(settings, "armazenamento", "mongo")
        monkeypatch.setattr(settings, "mongo_uri", None)

        with pytest.raises(SystemExit) as excinfo:
            main.run()

        assert excinfo.value.code == 1

    def test_lifespan_com_armazenamento_em_memoria(self, monkeypatch):
        monkeypatch.setattr(settings, "armazenamento", "memoria")
        app = main.create_app()

        with TestClient(app, headers=cabecalho_basic(settings.api_usuario, settings.api_senha)) as test_client:
            response = test_client.get("/api/produtos")

        assert response.status_code == 200
        assert response.json() == []
