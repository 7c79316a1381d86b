"""
Confirmação da importação de NF-e: fornecedor, produtos, entrada e despesa.
"""
from decimal import Decimal

import pytest
from fastapi import HTTPException

from oficina.models import (
    EntradaEstoque, Fornecedor, Produto, Transacao, TipoTransacao, StatusTransacao
)
from oficina.schemas.importacao import ImportacaoNFe
from oficina.services.importacao_service import confirmar_importacao

CHAVE = "NFe35260144444444000144550010000099991000099999"


def _importacao(itens, chave=CHAVE, cnpj="44.444.444/0001-44", nome="Auto Pecas Norte", valor_total=None):
    if valor_total is None:
        valor_total = sum(Decimal(i["preco_custo"]) * Decimal(i["quantidade"]) for i in itens)
    return ImportacaoNFe(
        fornecedor_nome=nome,
        fornecedor_cnpj=cnpj,
        chave=chave,
        valor_total=valor_total,
        itens=itens,
    )


def _item(sku, quantidade, custo, venda, nome=None):
    return {
        "sku": sku,
        "nome": nome or f"Peca {sku}",
        "quantidade": quantidade,
        "preco_custo": custo,
        "preco_venda": venda,
    }


def test_fornecedor_novo_cria_tudo_uma_vez(db, contexto_a):
    dados = _importacao([_item("VELA-01", "4", "12.50", "16.25"), _item("CORREIA", "1", "80.00", "104.00")])

    resultado = confirmar_importacao(db, contexto_a, dados)

    fornecedores = db.query(Fornecedor).filter(Fornecedor.tenant_id == contexto_a.tenant_id).all()
    assert len(fornecedores) == 1
    assert fornecedores[0].cnpj == "44444444000144"
    assert fornecedores[0].nome == "Auto Pecas Norte"

    assert db.query(EntradaEstoque).count() == 1
    assert resultado.entrada.chave_nfe == CHAVE
    assert resultado.entrada.valor_total == Decimal("130.00")
    assert resultado.entrada.quantidade_itens == 2

    despesas = db.query(Transacao).all()
    assert len(despesas) == 1
    despesa = despesas[0]
    assert despesa.tipo == TipoTransacao.DESPESA
    assert despesa.status == StatusTransacao.PENDENTE
    assert despesa.valor == Decimal("130.00")
    assert despesa.categoria == "Compra de Estoque"
    assert despesa.descricao == "Compra de Estoque - Auto Pecas Norte"
    assert despesa.entrada_estoque_id == resultado.entrada.id

    assert resultado.produtos_criados == 2
    assert resultado.produtos_atualizados == 0
    vela = db.query(Produto).filter(Produto.sku == "VELA-01").one()
    assert vela.quantidade == Decimal("4")
    assert vela.fornecedor_id == fornecedores[0].id


def test_reimportar_soma_estoque_e_sobrescreve_precos(db, contexto_a):
    confirmar_importacao(db, contexto_a, _importacao([_item("VELA-01", "4", "12.50", "16.25")]))

    segunda = _importacao([_item("VELA-01", "6", "13.00", "17.00")], chave=CHAVE.replace("9999", "8888"))
    resultado = confirmar_importacao(db, contexto_a, segunda)

    produtos = db.query(Produto).all()
    assert len(produtos) == 1
    assert produtos[0].quantidade == Decimal("10")
    assert produtos[0].preco_custo == Decimal("13.00")
    assert produtos[0].preco_venda == Decimal("17.00")
    assert resultado.produtos_atualizados == 1
    assert db.query(Fornecedor).count() == 1
    assert db.query(Transacao).count() == 2


def test_fornecedor_existente_e_reutilizado(db, contexto_a, fornecedor_a, filtro_oleo):
    dados = _importacao(
        [_item("PSL55", "10", "18.50", "24.05")],
        cnpj=fornecedor_a.cnpj, nome="Nome diferente na nota"
    )

    confirmar_importacao(db, contexto_a, dados)

    assert db.query(Fornecedor).count() == 1
    assert db.get(Produto, filtro_oleo.id).quantidade == Decimal("15")


def test_mesmo_sku_de_outro_fornecedor_e_outro_produto(db, contexto_a, filtro_oleo):
    confirmar_importacao(db, contexto_a, _importacao([_item("PSL55", "3", "17.00", "22.10")]))

    assert db.query(Produto).filter(Produto.sku == "PSL55").count() == 2
    assert db.get(Produto, filtro_oleo.id).quantidade == Decimal("5")


def test_sku_repetido_na_mesma_nota(db, contexto_a):
    dados = _importacao([_item("VELA-01", "4", "12.50", "16.25"), _item("VELA-01", "2", "12.50", "16.25")])

    resultado = confirmar_importacao(db, contexto_a, dados)

    assert db.query(Produto).one().quantidade == Decimal("6")
    assert resultado.produtos_criados == 1
    assert resultado.produtos_atualizados == 1


def test_chave_ja_importada_e_409_sem_gravar(db, contexto_a):
    confirmar_importacao(db, contexto_a, _importacao([_item("VELA-01", "4", "12.50", "16.25")]))

    with pytest.raises(HTTPException) as exc:
        confirmar_importacao(db, contexto_a, _importacao([_item("VELA-01", "4", "12.50", "16.25")]))

    assert exc.value.status_code == 409
    assert db.query(Produto).one().quantidade == Decimal("4")
    assert db.query(Transacao).count() == 1


def test_mesma_chave_em_outra_oficina(db, contexto_a, contexto_b):
    confirmar_importacao(db, contexto_a, _importacao([_item("VELA-01", "4", "12.50", "16.25")]))
    confirmar_importacao(db, contexto_b, _importacao([_item("VELA-01", "1", "12.50", "16.25")]))

    assert db.query(EntradaEstoque).count() == 2
    assert db.query(Fornecedor).count() == 2


def test_divergencia_entre_total_declarado_e_itens(db, contexto_a):
    # operador corrigiu o custo na pre-visualizacao; a conta a pagar segue o vNF
    dados = _importacao([_item("VELA-01", "4", "11.00", "14.30")], valor_total=Decimal("50.00"))

    resultado = confirmar_importacao(db, contexto_a, dados)

    assert resultado.entrada.valor_itens == Decimal("44.00")
    assert resultado.divergencia == Decimal("6.00")
    assert resultado.transacao.valor == Decimal("50.00")


def test_custo_fracionado_gravado_sem_arredondar(db, contexto_a):
    dados = _importacao([_item("ARR-08", "1000", "0.0049", "0.01")], valor_total=Decimal("4.90"))

    resultado = confirmar_importacao(db, contexto_a, dados)

    arruela = db.query(Produto).one()
    assert arruela.preco_custo == Decimal("0.0049")
    assert arruela.preco_venda == Decimal("0.01")
    assert resultado.entrada.valor_itens == Decimal("4.90")
    assert resultado.divergencia == Decimal("0.00")
