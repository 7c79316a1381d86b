"""
Sequencers - Geradores de números sequenciais

Usa a tabela 'sequencias' para que a numeração NUNCA reinicie,
mesmo se registros forem deletados.
"""
from datetime import datetime
from sqlalchemy.orm import Session


def generate_sequential_number(
    db: Session,
    prefix: str,
    tenant_id: int,
    year: int = None,
    digits: int = 5
) -> str:
    """
    Gera número sequencial no formato: PREFIX-AAAA-NNNNN

    O incremento participa da transação corrente (flush, sem commit): se a
    gravação da OS falhar, o número volta junto no rollback.

    Usage:
        numero = generate_sequential_number(db, Prefixes.ORDEM_SERVICO, tenant_id)
        # Retorna: "OS-2026-00001"
    """
    from oficina.models.sequencia import Sequencia

    ano = year or datetime.now().year

    sequencia = db.query(Sequencia).filter(
        Sequencia.tenant_id == tenant_id,
        Sequencia.prefixo == prefix,
        Sequencia.ano == ano
    ).with_for_update().first()

    if not sequencia:
        sequencia = Sequencia(
            tenant_id=tenant_id,
            prefixo=prefix,
            ano=ano,
            ultimo_numero=0
        )
        db.add(sequencia)

    sequencia.ultimo_numero += 1
    proximo = sequencia.ultimo_numero

    db.flush()

    return f"{prefix}-{ano}-{proximo:0{digits}d}"


class Prefixes:
    ORDEM_SERVICO = "OS"
