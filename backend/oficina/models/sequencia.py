"""
Contador persistente de numeração por tenant (ex: OS-2026-00001)
"""
from sqlalchemy import Column, Integer, String, UniqueConstraint
from oficina.models.base import Base


class Sequencia(Base):
    """
    Último número usado por (tenant, prefixo, ano).
    Nunca é limpa: números de OS não se repetem nem após exclusões.
    """
    __tablename__ = "sequencias"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, nullable=False, index=True)
    prefixo = Column(String(10), nullable=False)
    ano = Column(Integer, nullable=False)
    ultimo_numero = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint('tenant_id', 'prefixo', 'ano', name='uq_sequencia_tenant_prefixo_ano'),
    )
