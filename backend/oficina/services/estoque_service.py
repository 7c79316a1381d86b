"""
Movimentacao de estoque

A quantidade e sempre alterada por UPDATE atomico no banco
(quantidade = quantidade +/- q), nunca lendo o valor e gravando outro:
finalizacoes e importacoes simultaneas no mesmo produto nao perdem baixas.
"""
import logging
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy.orm import Session

from oficina.config import settings
from oficina.core.contexto import ContextoRequisicao
from oficina.core.unidade_trabalho import unidade_de_trabalho
from oficina.models.produto import Produto

logger = logging.getLogger(__name__)


def _produto_query(db: Session, contexto: ContextoRequisicao, produto_id: int):
    return db.query(Produto).filter(
        Produto.id == produto_id,
        Produto.tenant_id == contexto.tenant_id
    )


def baixar_estoque(
    db: Session,
    contexto: ContextoRequisicao,
    produto_id: int,
    quantidade: Decimal,
    permitir_negativo: bool = None
) -> bool:
    """
    Subtrai quantidade do estoque do produto.

    Sem PERMITIR_ESTOQUE_NEGATIVO o UPDATE so casa se houver saldo
    (quantidade >= q); sem saldo levanta 409 e a transacao do chamador
    e desfeita.

    Returns:
        False se o produto nao existe mais (foi excluido do catalogo);
        a baixa e ignorada, como a OS ja guarda a descricao do item.
    """
    if permitir_negativo is None:
        permitir_negativo = settings.PERMITIR_ESTOQUE_NEGATIVO

    query = _produto_query(db, contexto, produto_id)
    if not permitir_negativo:
        query = query.filter(Produto.quantidade >= quantidade)

    linhas = query.update(
        {Produto.quantidade: Produto.quantidade - quantidade},
        synchronize_session=False
    )
    if linhas:
        return True

    produto = _produto_query(db, contexto, produto_id).first()
    if produto is None:
        logger.warning(f"[ESTOQUE] Produto {produto_id} nao existe mais; baixa de {quantidade} ignorada")
        return False

    raise HTTPException(
        status_code=409,
        detail=(
            f"Estoque insuficiente para '{produto.nome}': "
            f"disponivel {produto.quantidade.normalize()}, necessario {Decimal(quantidade).normalize()}"
        )
    )


def repor_estoque(
    db: Session,
    contexto: ContextoRequisicao,
    produto_id: int,
    quantidade: Decimal
) -> None:
    """Soma quantidade ao estoque (entrada de NF-e, ajuste de inventario)"""
    linhas = _produto_query(db, contexto, produto_id).update(
        {Produto.quantidade: Produto.quantidade + quantidade},
        synchronize_session=False
    )
    if not linhas:
        raise HTTPException(status_code=404, detail="Produto não encontrado")


def ajustar_estoque(
    db: Session,
    contexto: ContextoRequisicao,
    produto_id: int,
    delta: Decimal,
    motivo: str = None
) -> Produto:
    """Ajuste manual de inventario; saidas respeitam a mesma regra de saldo da OS"""
    with unidade_de_trabalho(db, f"ajuste de estoque do produto {produto_id}"):
        if delta >= 0:
            repor_estoque(db, contexto, produto_id, delta)
        elif not baixar_estoque(db, contexto, produto_id, -delta):
            raise HTTPException(status_code=404, detail="Produto não encontrado")

    produto = _produto_query(db, contexto, produto_id).first()
    logger.info(
        f"[ESTOQUE] Ajuste de {delta} no produto {produto_id} (tenant {contexto.tenant_id})"
        + (f": {motivo}" if motivo else "")
    )
    return produto
