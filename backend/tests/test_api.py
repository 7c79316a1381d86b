"""
Fluxos HTTP: autenticação, isolamento entre oficinas, OS, importação de NF-e
e financeiro.
"""
from decimal import Decimal

import pytest

from conftest import SENHA_PADRAO

API = "/api/v1"


def _dec(valor):
    return Decimal(str(valor))


# ============ AUTENTICACAO ============

class TestAutenticacao:

    def test_health_e_publico(self, client):
        assert client.get("/health").json() == {"status": "healthy"}

    @pytest.mark.parametrize("path", [
        "/produtos/", "/servicos/", "/ordens-servico/", "/financeiro/resumo", "/auth/me",
    ])
    def test_rotas_protegidas_exigem_token(self, client, path):
        resp = client.get(f"{API}{path}")
        assert resp.status_code == 401

    def test_token_invalido(self, client):
        resp = client.get(f"{API}/produtos/", headers={"Authorization": "Bearer nao-e-um-jwt"})
        assert resp.status_code == 401
        assert "Token inválido" in resp.json()["detail"]

    def test_login_e_me(self, client, admin_a, tenant_a):
        resp = client.post(f"{API}/auth/login", json={"email": "admin@alfa.com.br", "senha": SENHA_PADRAO})
        assert resp.status_code == 200
        corpo = resp.json()
        assert corpo["token_type"] == "bearer"
        assert corpo["tenant"]["slug"] == "alfa"

        me = client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {corpo['access_token']}"})
        assert me.status_code == 200
        assert me.json()["id"] == admin_a.id
        assert "senha_hash" not in me.json()

    def test_login_senha_errada(self, client, admin_a):
        resp = client.post(f"{API}/auth/login", json={"email": "admin@alfa.com.br", "senha": "errada"})
        assert resp.status_code == 401

    def test_login_oficina_inativa(self, client, db, admin_a, tenant_a):
        tenant_a.ativo = False
        db.commit()

        resp = client.post(f"{API}/auth/login", json={"email": "admin@alfa.com.br", "senha": SENHA_PADRAO})
        assert resp.status_code == 401


# ============ ISOLAMENTO ============

class TestIsolamentoEntreOficinas:

    def test_listagem_mostra_apenas_a_propria_oficina(self, client, headers_a, headers_b, filtro_oleo):
        assert client.get(f"{API}/produtos/", headers=headers_a).json()["total"] == 1
        assert client.get(f"{API}/produtos/", headers=headers_b).json()["total"] == 0

    @pytest.mark.parametrize("method,path", [
        ("get", "/produtos/{id}"),
        ("delete", "/produtos/{id}"),
    ])
    def test_registro_de_outra_oficina_e_404(self, client, headers_b, filtro_oleo, method, path):
        resp = getattr(client, method)(f"{API}{path.format(id=filtro_oleo.id)}", headers=headers_b)
        assert resp.status_code == 404

    def test_os_de_outra_oficina_e_404(self, client, headers_a, headers_b, troca_oleo):
        criada = client.post(f"{API}/ordens-servico/", headers=headers_a, json={
            "veiculo_placa": "ABC1D23",
            "itens": [{"tipo": "SERVICO", "servico_id": troca_oleo.id}],
        }).json()

        assert client.get(f"{API}/ordens-servico/{criada['id']}", headers=headers_b).status_code == 404
        resp = client.post(f"{API}/ordens-servico/{criada['id']}/finalizar", headers=headers_b, json={"confirmar": True})
        assert resp.status_code == 404


# ============ CATALOGO ============

class TestCatalogo:

    def test_crud_de_produto(self, client, headers_a, fornecedor_a):
        resp = client.post(f"{API}/produtos/", headers=headers_a, json={
            "sku": "AMORT-D", "nome": "Amortecedor dianteiro", "preco_custo": "210.00",
            "preco_venda": "289.90", "quantidade": "2", "estoque_minimo": "4",
            "fornecedor_id": fornecedor_a.id,
        })
        assert resp.status_code == 201
        produto_id = resp.json()["id"]

        baixo = client.get(f"{API}/produtos/", headers=headers_a, params={"estoque_baixo": True}).json()
        assert [p["id"] for p in baixo["items"]] == [produto_id]

        resp = client.put(f"{API}/produtos/{produto_id}", headers=headers_a, json={"preco_venda": "299.90"})
        assert _dec(resp.json()["preco_venda"]) == Decimal("299.90")

        resp = client.patch(f"{API}/produtos/{produto_id}/estoque", headers=headers_a, json={"delta": "3"})
        assert _dec(resp.json()["quantidade"]) == Decimal("5")

        assert client.delete(f"{API}/produtos/{produto_id}", headers=headers_a).status_code == 204

    def test_fornecedor_com_cnpj_duplicado_e_409(self, client, headers_a, fornecedor_a):
        resp = client.post(f"{API}/fornecedores/", headers=headers_a, json={
            "nome": "Outro", "cnpj": "33.333.333/0001-33",
        })
        assert resp.status_code == 409

    def test_veiculo_placa_normalizada_e_unica(self, client, headers_a):
        resp = client.post(f"{API}/veiculos/", headers=headers_a, json={"placa": "abc-1d23", "modelo": "Onix"})
        assert resp.status_code == 201
        assert resp.json()["placa"] == "ABC1D23"

        resp = client.post(f"{API}/veiculos/", headers=headers_a, json={"placa": "ABC1D23"})
        assert resp.status_code == 409

    def test_placa_invalida_e_422(self, client, headers_a):
        resp = client.post(f"{API}/veiculos/", headers=headers_a, json={"placa": "12345678"})
        assert resp.status_code == 422


# ============ ORDEM DE SERVICO ============

class TestFluxoOrdemServico:

    def test_abrir_finalizar_e_receber(self, client, headers_a, filtro_oleo, troca_oleo):
        resp = client.post(f"{API}/ordens-servico/", headers=headers_a, json={
            "veiculo_placa": "abc1d23",
            "veiculo_modelo": "Gol 1.6",
            "itens": [
                {"tipo": "PRODUTO", "produto_id": filtro_oleo.id, "quantidade": 2},
                {"tipo": "SERVICO", "servico_id": troca_oleo.id},
            ],
        })
        assert resp.status_code == 201
        ordem = resp.json()
        assert _dec(ordem["total"]) == Decimal("110.00")
        assert ordem["status"] == "ABERTO"

        resp = client.post(f"{API}/ordens-servico/{ordem['id']}/finalizar", headers=headers_a, json={})
        assert resp.status_code == 400

        resp = client.post(f"{API}/ordens-servico/{ordem['id']}/finalizar", headers=headers_a, json={"confirmar": True})
        assert resp.status_code == 200
        assert resp.json()["status"] == "CONCLUIDO"

        resp = client.post(f"{API}/ordens-servico/{ordem['id']}/finalizar", headers=headers_a, json={"confirmar": True})
        assert resp.status_code == 409

        produto = client.get(f"{API}/produtos/{filtro_oleo.id}", headers=headers_a).json()
        assert _dec(produto["quantidade"]) == Decimal("3")

        receber = client.get(f"{API}/financeiro/transacoes", headers=headers_a, params={"aba": "receber"}).json()
        assert receber["total"] == 1
        receita = receber["items"][0]
        assert _dec(receita["valor"]) == Decimal("110.00")
        assert receita["ordem_servico_id"] == ordem["id"]

        resp = client.post(f"{API}/financeiro/transacoes/{receita['id']}/pagar", headers=headers_a)
        assert resp.json()["status"] == "PAGO"

        resumo = client.get(f"{API}/financeiro/resumo", headers=headers_a).json()
        assert _dec(resumo["receitas"]) == Decimal("110.00")
        assert _dec(resumo["pendente_receber"]) == Decimal("0.00")

    def test_edicao_mantem_preco_gravado(self, client, headers_a, filtro_oleo):
        ordem = client.post(f"{API}/ordens-servico/", headers=headers_a, json={
            "veiculo_placa": "ABC1D23",
            "itens": [{"tipo": "PRODUTO", "produto_id": filtro_oleo.id}],
        }).json()
        client.put(f"{API}/produtos/{filtro_oleo.id}", headers=headers_a, json={"preco_venda": "80.00"})

        resp = client.put(f"{API}/ordens-servico/{ordem['id']}", headers=headers_a, json={
            "veiculo_placa": "ABC1D23",
            "status": "EM_ANDAMENTO",
            "itens": [{"id": ordem["itens"][0]["id"], "tipo": "PRODUTO", "quantidade": 2}],
        })
        assert resp.status_code == 200
        assert _dec(resp.json()["itens"][0]["preco_unitario"]) == Decimal("25.00")
        assert _dec(resp.json()["total"]) == Decimal("50.00")

    def test_item_sem_referencia_e_422(self, client, headers_a):
        resp = client.post(f"{API}/ordens-servico/", headers=headers_a, json={
            "veiculo_placa": "ABC1D23",
            "itens": [{"tipo": "PRODUTO", "quantidade": 1}],
        })
        assert resp.status_code == 422

    def test_busca_por_placa(self, client, headers_a):
        client.post(f"{API}/ordens-servico/", headers=headers_a, json={"veiculo_placa": "ABC1D23"})
        client.post(f"{API}/ordens-servico/", headers=headers_a, json={"veiculo_placa": "XYZ9876"})

        resp = client.get(f"{API}/ordens-servico/", headers=headers_a, params={"busca": "xyz-9876"}).json()
        assert resp["total"] == 1
        assert resp["items"][0]["veiculo_placa"] == "XYZ9876"


# ============ IMPORTACAO NF-E ============

class TestFluxoImportacao:

    def test_preview_e_confirmacao(self, client, headers_a, nfe_xml):
        xml = nfe_xml([("VELA-01", "Vela de ignicao", "4.0000", "12.5000", "UN")])

        preview = client.post(f"{API}/importacoes/preview", headers=headers_a, json={"xml": xml})
        assert preview.status_code == 200
        dados = preview.json()
        assert _dec(dados["itens"][0]["preco_venda"]) == Decimal("16.25")

        # operador ajusta o preco de venda antes de confirmar
        dados["itens"][0]["preco_venda"] = "17.90"
        dados.pop("margem_percentual")
        resp = client.post(f"{API}/importacoes/confirmar", headers=headers_a, json=dados)
        assert resp.status_code == 201
        entrada = resp.json()
        assert entrada["produtos_criados"] == 1
        assert entrada["transacao_id"] is not None
        assert _dec(entrada["divergencia"]) == Decimal("0.00")

        produtos = client.get(f"{API}/produtos/", headers=headers_a).json()["items"]
        assert _dec(produtos[0]["preco_venda"]) == Decimal("17.90")

        pagar = client.get(f"{API}/financeiro/transacoes", headers=headers_a, params={"aba": "pagar"}).json()
        assert _dec(pagar["items"][0]["valor"]) == Decimal("50.00")

        resp = client.post(f"{API}/importacoes/confirmar", headers=headers_a, json=dados)
        assert resp.status_code == 409

    def test_preview_xml_invalido_e_400(self, client, headers_a):
        resp = client.post(f"{API}/importacoes/preview", headers=headers_a, json={"xml": "<nfeProc/>"})
        assert resp.status_code == 400
        assert "Erro ao processar XML" in resp.json()["detail"]


# ============ EQUIPE ============

class TestEquipe:

    def test_admin_lista_apenas_a_propria_equipe(self, client, headers_a, funcionario_a, admin_b):
        resp = client.get(f"{API}/usuarios/", headers=headers_a)
        assert resp.status_code == 200
        emails = sorted(u["email"] for u in resp.json())
        assert emails == ["admin@alfa.com.br", "mecanico@alfa.com.br"]

    def test_funcionario_desativado_nao_entra(self, client, headers_a, funcionario_a):
        resp = client.put(f"{API}/usuarios/{funcionario_a.id}", headers=headers_a, json={"ativo": False})
        assert resp.status_code == 200
        assert resp.json()["ativo"] is False

        login = client.post(f"{API}/auth/login", json={"email": "mecanico@alfa.com.br", "senha": SENHA_PADRAO})
        assert login.status_code == 401

    def test_admin_nao_se_desativa(self, client, headers_a, admin_a):
        resp = client.put(f"{API}/usuarios/{admin_a.id}", headers=headers_a, json={"ativo": False})
        assert resp.status_code == 400

    def test_usuario_de_outra_oficina_e_404(self, client, headers_a, admin_b):
        resp = client.put(f"{API}/usuarios/{admin_b.id}", headers=headers_a, json={"nome_completo": "Invasor"})
        assert resp.status_code == 404

    def test_funcionario_nao_gerencia_equipe(self, client, headers_funcionario_a):
        assert client.get(f"{API}/usuarios/", headers=headers_funcionario_a).status_code == 403
