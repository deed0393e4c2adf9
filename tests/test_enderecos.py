# tests/test_enderecos.py
from auxiliares import criar_cliente, criar_endereco, dados_endereco


class TestEnderecosAPI:
    """
    TESTES DE INTEGRAÇÃO: Endpoints de endereços.

    REGRA CENTRAL: cada cliente tem no máximo um endereço, e o cliente
    guarda a referência para ele.
    """

    def test_criar_endereco_vincula_cliente(self, client):
        # ARRANGE
        cliente = criar_cliente(client)

        # ACT
        response = client.post("/api/enderecos", json=dados_endereco(cliente["id"]))

        # ASSERT
        assert response.status_code == 201
        endereco = response.json()
        assert endereco["id"] == 1
        assert endereco["_id"]
        assert endereco["complemento"] is None

        vinculado = client.get(f"/api/clientes/{cliente['id']}").json()
        assert vinculado["enderecoId"] == endereco["_id"]
        assert endereco["clienteId"]

    def test_criar_endereco_pelo_id_interno_do_cliente(self, client):
        cliente = criar_cliente(client)
        primeiro = criar_endereco(client, cliente["id"])
        client.delete(f"/api/enderecos/{primeiro['id']}")

        response = client.post("/api/enderecos", json=dados_endereco(primeiro["clienteId"]))

        assert response.status_code == 201
        assert response.json()["clienteId"] == primeiro["clienteId"]

    def test_segundo_endereco_do_mesmo_cliente_conflita(self, client):
        cliente = criar_cliente(client)
        criar_endereco(client, cliente["id"])

        response = client.post("/api/enderecos", json=dados_endereco(cliente["id"], numero="2"))

        assert response.status_code == 409
        assert response.json()["message"] == f"Cliente com ID {cliente['id']} já possui endereço."
        assert len(client.get("/api/enderecos").json()) == 1

    def test_cliente_inexistente_retorna_404(self, client):
        response = client.post("/api/enderecos", json=dados_endereco(77))

        assert response.status_code == 404
        assert client.get("/api/enderecos").json() == []

    def test_cliente_id_obrigatorio(self, client):
        dados = dados_endereco(1)
        del dados["clienteId"]

        response = client.post("/api/enderecos", json=dados)

        assert response.status_code == 400

    def test_buscar_endereco_inexistente(self, client):
        response = client.get("/api/enderecos/5")

        assert response.status_code == 404
        assert response.json()["message"] == "Endereço com ID 5 não encontrado."

    def test_atualizar_endereco_nao_troca_dono(self, client):
        cliente = criar_cliente(client)
        endereco = criar_endereco(client, cliente["id"])

        response = client.patch(
            f"/api/enderecos/{endereco['id']}",
            json={"numero": "2000", "clienteId": "outro"},
        )

        assert response.status_code == 200
        corpo = response.json()
        assert corpo["mensagem"] == "Endereço atualizado com sucesso"
        assert corpo["endereco"]["numero"] == "2000"
        assert corpo["endereco"]["clienteId"] == endereco["clienteId"]

    def test_substituir_endereco_troca_de_cliente(self, client):
        """
        TESTE PUT: trocar o dono move a referência entre os clientes.
        """
        ana = criar_cliente(client, email="ana@exemplo.com")
        bia = criar_cliente(client, email="bia@exemplo.com", nome="Bia")
        endereco = criar_endereco(client, ana["id"])

        response = client.put(
            f"/api/enderecos/{endereco['id']}",
            json=dados_endereco(bia["id"], logradouro="Rua Augusta"),
        )

        assert response.status_code == 200
        assert response.json()["endereco"]["logradouro"] == "Rua Augusta"
        assert client.get(f"/api/clientes/{ana['id']}").json()["enderecoId"] is None
        assert client.get(f"/api/clientes/{bia['id']}").json()["enderecoId"] == endereco["_id"]

    def test_substituir_para_cliente_com_endereco_conflita(self, client):
        ana = criar_cliente(client, email="ana@exemplo.com")
        bia = criar_cliente(client, email="bia@exemplo.com", nome="Bia")
        endereco_ana = criar_endereco(client, ana["id"])
        criar_endereco(client, bia["id"])

        response = client.put(f"/api/enderecos/{endereco_ana['id']}", json=dados_endereco(bia["id"]))

        assert response.status_code == 409

    def test_deletar_endereco_limpa_referencia(self, client):
        cliente = criar_cliente(client)
        endereco = criar_endereco(client, cliente["id"])

        response = client.delete(f"/api/enderecos/{endereco['id']}")

        assert response.status_code == 200
        assert response.json()["mensagem"] == "Endereço deletado com sucesso"
        assert client.get(f"/api/clientes/{cliente['id']}").json()["enderecoId"] is None

    def test_deletar_endereco_inexistente(self, client):
        assert client.delete("/api/enderecos/3").status_code == 404
