"""
Fronteira transacional dos fluxos de varias etapas

Gravar OS + itens, finalizar OS (status + baixa de estoque + receita) e
confirmar importacao de NF-e (fornecedor + produtos + entrada + despesa)
acontecem dentro de uma unica transacao do banco: ou tudo e gravado, ou nada.
"""
import logging
from contextlib import contextmanager

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@contextmanager
def unidade_de_trabalho(db: Session, operacao: str):
    """
    Executa o bloco e faz commit no final; qualquer erro desfaz tudo.

    HTTPException (regra de negocio) sobe como esta, sem log de erro.
    Violacao de unicidade vira 409 (gravacao concorrente do mesmo registro).

    Usage:
        with unidade_de_trabalho(db, f"finalizacao da OS {ordem.numero}"):
            ...
    """
    try:
        yield db
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"[TRANSACAO] Conflito de gravacao em {operacao}: {e.orig}")
        raise HTTPException(
            status_code=409,
            detail=f"Conflito ao gravar {operacao}. Outro usuario alterou os mesmos dados; tente novamente."
        )
    except Exception:
        db.rollback()
        logger.exception(f"[TRANSACAO] Erro em {operacao}; nenhuma alteracao foi gravada")
        raise
