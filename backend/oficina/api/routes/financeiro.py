"""
Rotas do Financeiro (contas a pagar / receber)
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from oficina.api.deps import get_db, get_contexto
from oficina.core.contexto import ContextoRequisicao
from oficina.schemas.financeiro import (
    AbaFinanceiro,
    TransacaoCreate,
    TransacaoResponse,
    TransacaoListResponse,
    ResumoFinanceiro
)
from oficina.services.financeiro_service import financeiro_service

router = APIRouter()


@router.get("/transacoes", response_model=TransacaoListResponse)
def listar_transacoes(
    aba: AbaFinanceiro = Query(AbaFinanceiro.VISAO_GERAL),
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Lançamentos da aba: visao_geral (pagos), pagar ou receber (pendentes)"""
    items = financeiro_service.listar_transacoes(db, contexto, aba)
    return {"items": items, "total": len(items)}


@router.post("/transacoes", response_model=TransacaoResponse, status_code=201)
def criar_transacao(
    dados: TransacaoCreate,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Lançar conta a pagar / receber manual"""
    return financeiro_service.criar_transacao(db, contexto, dados)


@router.post("/transacoes/{transacao_id}/pagar", response_model=TransacaoResponse)
def marcar_como_pago(
    transacao_id: int,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Baixar lançamento pendente (409 se já pago)"""
    return financeiro_service.marcar_como_pago(db, contexto, transacao_id)


@router.get("/resumo", response_model=ResumoFinanceiro)
def resumo(
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Totais do painel financeiro"""
    return financeiro_service.resumo(db, contexto)
