# tests/test_entregas.py
import pytest

from auxiliares import criar_cliente, criar_endereco, criar_produto, dados_entrega


@pytest.fixture
def cenario(client):
    """Cliente com endereço e dois produtos cadastrados."""
    cliente = criar_cliente(client)
    endereco = criar_endereco(client, cliente["id"])
    produtos = [criar_produto(client, nome="Notebook"), criar_produto(client, nome="Mouse")]
    return {"endereco_id": endereco["id"], "produtos_ids": [p["id"] for p in produtos]}


def _criar_entrega(client, cenario, **extras) -> dict:
    response = client.post(
        "/api/entregas", json=dados_entrega(cenario["endereco_id"], cenario["produtos_ids"], **extras)
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestEntregasAPI:
    """
    TESTES DE INTEGRAÇÃO: Endpoints de entregas.

    CONCEITOS TESTADOS:
    - validação de endereço e produtos referenciados
    - bloqueio de edição em entregas finalizadas
    - filtros por status e por endereço
    """

    def test_criar_entrega_nasce_pendente(self, client, cenario):
        # ACT
        entrega = _criar_entrega(client, cenario)

        # ASSERT
        assert entrega["id"] == 1
        assert entrega["status"] == "PENDENTE"
        assert entrega["dataEntregaReal"] is None
        assert entrega["produtosNestaEntregaIds"] == cenario["produtos_ids"]
        assert entrega["dataPrevista"].startswith("2025-12-01T10:00:00")

    def test_status_enviado_na_criacao_e_ignorado(self, client, cenario):
        entrega = _criar_entrega(client, cenario, status="ENTREGUE")

        assert entrega["status"] == "PENDENTE"

    def test_endereco_inexistente_retorna_404(self, client, cenario):
        response = client.post("/api/entregas", json=dados_entrega(99, cenario["produtos_ids"]))

        assert response.status_code == 404
        assert response.json()["message"] == "Endereço de entrega com ID 99 não encontrado."

    def test_produto_inexistente_retorna_400(self, client, cenario):
        response = client.post(
            "/api/entregas", json=dados_entrega(cenario["endereco_id"], [cenario["produtos_ids"][0], 50])
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Produto com ID 50 não encontrado."
        assert client.get("/api/entregas").json() == []

    def test_lista_de_produtos_vazia_rejeitada(self, client, cenario):
        response = client.post("/api/entregas", json=dados_entrega(cenario["endereco_id"], []))

        assert response.status_code == 400

    def test_frete_deve_ser_positivo(self, client, cenario):
        response = client.post(
            "/api/entregas",
            json=dados_entrega(cenario["endereco_id"], cenario["produtos_ids"], valorFrete=0),
        )

        assert response.status_code == 400

    def test_atualizar_entrega_pendente(self, client, cenario):
        entrega = _criar_entrega(client, cenario)

        response = client.patch(f"/api/entregas/{entrega['id']}", json={"valorFrete": 30.0})

        assert response.status_code == 200
        assert response.json()["entrega"]["valorFrete"] == 30.0

    def test_atualizar_com_produto_inexistente(self, client, cenario):
        entrega = _criar_entrega(client, cenario)

        response = client.patch(f"/api/entregas/{entrega['id']}", json={"produtosNestaEntregaIds": [7]})

        assert response.status_code == 400

    @pytest.mark.parametrize("status_final", ["ENTREGUE", "CANCELADA"])
    def test_entrega_finalizada_nao_pode_ser_editada(self, client, cenario, status_final):
        """
        TESTE DE REGRA DE NEGÓCIO: ENTREGUE e CANCELADA são terminais.
        """
        entrega = _criar_entrega(client, cenario)
        client.patch(f"/api/entregas/{entrega['id']}/status", json={"status": status_final})

        response = client.patch(f"/api/entregas/{entrega['id']}", json={"valorFrete": 99.0})

        assert response.status_code == 400
        assert response.json()["message"] == (
            f"Não é possível atualizar a entrega ID {entrega['id']}, status atual: {status_final}."
        )
        assert client.get(f"/api/entregas/{entrega['id']}").json()["valorFrete"] == 25.5

    def test_status_entregue_registra_data_real(self, client, cenario):
        entrega = _criar_entrega(client, cenario)

        response = client.patch(f"/api/entregas/{entrega['id']}/status", json={"status": "ENTREGUE"})

        assert response.status_code == 200
        corpo = response.json()
        assert corpo["mensagem"] == "Status da entrega atualizado"
        assert corpo["entrega"]["status"] == "ENTREGUE"
        assert corpo["entrega"]["dataEntregaReal"] is not None

    def test_status_invalido_rejeitado(self, client, cenario):
        entrega = _criar_entrega(client, cenario)

        response = client.patch(f"/api/entregas/{entrega['id']}/status", json={"status": "PERDIDA"})

        assert response.status_code == 400

    def test_substituir_preserva_status(self, client, cenario):
        entrega = _criar_entrega(client, cenario)
        client.patch(f"/api/entregas/{entrega['id']}/status", json={"status": "EM_TRANSITO"})

        response = client.put(
            f"/api/entregas/{entrega['id']}",
            json=dados_entrega(cenario["endereco_id"], cenario["produtos_ids"][:1], valorFrete=12.0),
        )

        assert response.status_code == 200
        substituida = response.json()["entrega"]
        assert substituida["status"] == "EM_TRANSITO"
        assert substituida["produtosNestaEntregaIds"] == cenario["produtos_ids"][:1]

    def test_filtrar_por_status(self, client, cenario):
        primeira = _criar_entrega(client, cenario)
        _criar_entrega(client, cenario)
        client.patch(f"/api/entregas/{primeira['id']}/status", json={"status": "CANCELADA"})

        response = client.get("/api/entregas?status=CANCELADA")

        assert response.status_code == 200
        assert [e["id"] for e in response.json()] == [primeira["id"]]

    def test_buscar_por_endereco(self, client, cenario):
        _criar_entrega(client, cenario)
        _criar_entrega(client, cenario)

        response = client.get(f"/api/entregas/endereco/{cenario['endereco_id']}")

        assert response.status_code == 200
        assert len(response.json()) == 2
        assert client.get("/api/entregas/endereco/404").json() == []

    def test_deletar_entrega(self, client, cenario):
        entrega = _criar_entrega(client, cenario)

        response = client.delete(f"/api/entregas/{entrega['id']}")

        assert response.status_code == 200
        assert response.json() == {"mensagem": "Entrega excluída com sucesso"}
        assert client.get(f"/api/entregas/{entrega['id']}").status_code == 404

    def test_status_pode_sair_de_estado_final(self, client, cenario):
        """
        TESTE DE REGRA: a troca de status não segue máquina de estados;
        só o PATCH geral é bloqueado em ENTREGUE/CANCELADA.
        """
        entrega = _criar_entrega(client, cenario)
        client.patch(f"/api/entregas/{entrega['id']}/status", json={"status": "CANCELADA"})

        response = client.patch(f"/api/entregas/{entrega['id']}/status", json={"status": "PENDENTE"})

        assert response.status_code == 200
        assert response.json()["entrega"]["status"] == "PENDENTE"
        assert client.get(f"/api/entregas/{entrega['id']}").json()["status"] == "PENDENTE"
