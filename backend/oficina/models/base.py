from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.orm import declared_attr, relationship
from datetime import datetime, timezone
from oficina.database import Base


def agora() -> datetime:
    return datetime.now(timezone.utc)


class TenantMixin:
    """
    Mixin para adicionar tenant_id em TODAS as tabelas de negocio
    CRÍTICO para isolamento multi-tenant

    Toda query de negocio filtra por tenant_id (ver api/utils/db_helpers.py).
    """

    @declared_attr
    def tenant_id(cls):
        return Column(Integer, ForeignKey('tenants.id'), nullable=False, index=True)

    @declared_attr
    def tenant(cls):
        return relationship("Tenant", foreign_keys=[cls.tenant_id])


class TimestampMixin:
    """
    Mixin para campos de auditoria temporal
    """
    created_at = Column(DateTime(timezone=True), default=agora, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=agora, onupdate=agora, nullable=False)


class AuditMixin:
    """
    Registra qual usuario criou / alterou o registro por ultimo
    """

    @declared_attr
    def created_by(cls):
        return Column(Integer, ForeignKey('usuarios.id'), nullable=True)

    @declared_attr
    def updated_by(cls):
        return Column(Integer, ForeignKey('usuarios.id'), nullable=True)


__all__ = ['Base', 'TenantMixin', 'TimestampMixin', 'AuditMixin', 'agora']
