from datetime import date, timedelta
from decimal import Decimal

import pytest
from fastapi import HTTPException

from oficina.models import Transacao, TipoTransacao, StatusTransacao
from oficina.schemas.financeiro import AbaFinanceiro, TransacaoCreate
from oficina.services.financeiro_service import financeiro_service


def _lancar(db, contexto, tipo, valor, descricao="Lancamento", vencimento=None):
    return financeiro_service.criar_transacao(db, contexto, TransacaoCreate(
        descricao=descricao,
        tipo=tipo,
        valor=Decimal(valor),
        data_vencimento=vencimento,
    ))


def test_lancamento_manual_e_pendente(db, contexto_a):
    transacao = _lancar(db, contexto_a, TipoTransacao.DESPESA, "350.00", "Aluguel")

    assert transacao.status == StatusTransacao.PENDENTE
    assert transacao.categoria == "Geral"
    assert transacao.valor == Decimal("350.00")
    assert transacao.tenant_id == contexto_a.tenant_id


def test_abas_separam_pagar_receber_e_pagos(db, contexto_a):
    hoje = date.today()
    aluguel = _lancar(db, contexto_a, TipoTransacao.DESPESA, "350.00", "Aluguel", hoje + timedelta(days=10))
    energia = _lancar(db, contexto_a, TipoTransacao.DESPESA, "120.00", "Energia", hoje + timedelta(days=2))
    servico = _lancar(db, contexto_a, TipoTransacao.RECEITA, "200.00", "Servico avulso", hoje)
    financeiro_service.marcar_como_pago(db, contexto_a, servico.id)

    pagar = financeiro_service.listar_transacoes(db, contexto_a, AbaFinanceiro.PAGAR)
    receber = financeiro_service.listar_transacoes(db, contexto_a, AbaFinanceiro.RECEBER)
    pagos = financeiro_service.listar_transacoes(db, contexto_a, AbaFinanceiro.VISAO_GERAL)

    assert [t.id for t in pagar] == [energia.id, aluguel.id]
    assert receber == []
    assert [t.id for t in pagos] == [servico.id]


def test_marcar_como_pago_duas_vezes_e_409(db, contexto_a):
    transacao = _lancar(db, contexto_a, TipoTransacao.RECEITA, "80.00")

    pago = financeiro_service.marcar_como_pago(db, contexto_a, transacao.id)
    assert pago.status == StatusTransacao.PAGO

    with pytest.raises(HTTPException) as exc:
        financeiro_service.marcar_como_pago(db, contexto_a, transacao.id)
    assert exc.value.status_code == 409


def test_lancamento_de_outra_oficina_e_404(db, contexto_a, contexto_b):
    transacao = _lancar(db, contexto_a, TipoTransacao.RECEITA, "80.00")

    with pytest.raises(HTTPException) as exc:
        financeiro_service.marcar_como_pago(db, contexto_b, transacao.id)

    assert exc.value.status_code == 404
    assert db.get(Transacao, transacao.id).status == StatusTransacao.PENDENTE


def test_resumo(db, contexto_a, contexto_b):
    receita = _lancar(db, contexto_a, TipoTransacao.RECEITA, "500.10")
    despesa = _lancar(db, contexto_a, TipoTransacao.DESPESA, "200.05")
    _lancar(db, contexto_a, TipoTransacao.RECEITA, "99.90")
    _lancar(db, contexto_a, TipoTransacao.DESPESA, "40.00")
    _lancar(db, contexto_b, TipoTransacao.RECEITA, "1000.00")
    financeiro_service.marcar_como_pago(db, contexto_a, receita.id)
    financeiro_service.marcar_como_pago(db, contexto_a, despesa.id)

    resumo = financeiro_service.resumo(db, contexto_a)

    assert resumo.receitas == Decimal("500.10")
    assert resumo.despesas == Decimal("200.05")
    assert resumo.saldo == Decimal("300.05")
    assert resumo.pendente_receber == Decimal("99.90")
    assert resumo.pendente_pagar == Decimal("40.00")


def test_resumo_sem_lancamentos(db, contexto_a):
    resumo = financeiro_service.resumo(db, contexto_a)
    assert resumo.saldo == Decimal("0.00")
    assert resumo.pendente_pagar == Decimal("0.00")
