"""
Servico Financeiro
Livro de contas a pagar / receber do tenant
"""
import logging
from decimal import Decimal
from typing import List

from fastapi import HTTPException
from sqlalchemy import func, case
from sqlalchemy.orm import Session

from oficina.api.utils import get_by_id, require_status
from oficina.core.contexto import ContextoRequisicao
from oficina.core.dinheiro import arredondar, formatar_reais
from oficina.core.unidade_trabalho import unidade_de_trabalho
from oficina.models.base import agora
from oficina.models.transacao import Transacao, TipoTransacao, StatusTransacao
from oficina.schemas.financeiro import AbaFinanceiro, TransacaoCreate, ResumoFinanceiro

logger = logging.getLogger(__name__)

LIMITE_VISAO_GERAL = 50


class FinanceiroService:
    """Consultas e baixas do livro financeiro"""

    def listar_transacoes(
        self,
        db: Session,
        contexto: ContextoRequisicao,
        aba: AbaFinanceiro = AbaFinanceiro.VISAO_GERAL
    ) -> List[Transacao]:
        """
        Lista por aba do painel:
        - visao_geral: ultimos lancamentos pagos (mais recentes primeiro)
        - pagar: despesas pendentes por vencimento
        - receber: receitas pendentes por vencimento
        """
        query = db.query(Transacao).filter(Transacao.tenant_id == contexto.tenant_id)

        if aba == AbaFinanceiro.VISAO_GERAL:
            return query.filter(
                Transacao.status == StatusTransacao.PAGO
            ).order_by(Transacao.data.desc(), Transacao.id.desc()).limit(LIMITE_VISAO_GERAL).all()

        tipo = TipoTransacao.DESPESA if aba == AbaFinanceiro.PAGAR else TipoTransacao.RECEITA
        return query.filter(
            Transacao.tipo == tipo,
            Transacao.status == StatusTransacao.PENDENTE
        ).order_by(Transacao.data_vencimento.asc(), Transacao.id.asc()).all()

    def criar_transacao(
        self,
        db: Session,
        contexto: ContextoRequisicao,
        dados: TransacaoCreate
    ) -> Transacao:
        """Lancamento manual, sempre PENDENTE"""
        transacao = Transacao(
            tenant_id=contexto.tenant_id,
            descricao=dados.descricao,
            tipo=dados.tipo,
            categoria=dados.categoria or "Geral",
            valor=arredondar(dados.valor),
            status=StatusTransacao.PENDENTE,
            data_vencimento=dados.data_vencimento,
            created_by=contexto.usuario_id,
        )
        with unidade_de_trabalho(db, "lançamento financeiro"):
            db.add(transacao)

        db.refresh(transacao)
        logger.info(
            f"[FINANCEIRO] {transacao.tipo.value} lancada (tenant {contexto.tenant_id}): "
            f"{transacao.descricao} {formatar_reais(transacao.valor)}"
        )
        return transacao

    def marcar_como_pago(
        self,
        db: Session,
        contexto: ContextoRequisicao,
        transacao_id: int
    ) -> Transacao:
        """Baixa de um lancamento pendente; data passa a ser a do pagamento"""
        with unidade_de_trabalho(db, f"baixa do lançamento {transacao_id}"):
            transacao = get_by_id(
                db, Transacao, transacao_id, contexto.tenant_id,
                error_message="Lançamento não encontrado"
            )
            require_status(transacao, StatusTransacao.PENDENTE, "Baixa", status_code=409)

            linhas = db.query(Transacao).filter(
                Transacao.id == transacao.id,
                Transacao.tenant_id == contexto.tenant_id,
                Transacao.status == StatusTransacao.PENDENTE
            ).update(
                {
                    Transacao.status: StatusTransacao.PAGO,
                    Transacao.data: agora(),
                    Transacao.updated_by: contexto.usuario_id,
                },
                synchronize_session=False
            )
            if not linhas:
                raise HTTPException(status_code=409, detail="Lançamento já foi baixado")

        db.refresh(transacao)
        logger.info(f"[FINANCEIRO] Lancamento {transacao.id} pago (tenant {contexto.tenant_id})")
        return transacao

    def resumo(self, db: Session, contexto: ContextoRequisicao) -> ResumoFinanceiro:
        """Totais do painel: receitas/despesas pagas, saldo e pendencias"""

        def soma(tipo, status):
            return func.coalesce(func.sum(case(
                ((Transacao.tipo == tipo) & (Transacao.status == status), Transacao.valor),
                else_=0
            )), 0)

        linha = db.query(
            soma(TipoTransacao.RECEITA, StatusTransacao.PAGO),
            soma(TipoTransacao.DESPESA, StatusTransacao.PAGO),
            soma(TipoTransacao.DESPESA, StatusTransacao.PENDENTE),
            soma(TipoTransacao.RECEITA, StatusTransacao.PENDENTE),
        ).filter(Transacao.tenant_id == contexto.tenant_id).one()

        receitas, despesas, pendente_pagar, pendente_receber = (arredondar(Decimal(str(v))) for v in linha)

        return ResumoFinanceiro(
            receitas=receitas,
            despesas=despesas,
            saldo=arredondar(receitas - despesas),
            pendente_pagar=pendente_pagar,
            pendente_receber=pendente_receber,
        )


financeiro_service = FinanceiroService()
