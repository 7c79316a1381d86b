"""
Models do sistema - Multi-tenant

IMPORTANTE: Todos os models de negócio herdam de TenantMixin, que adiciona
tenant_id. Isso garante isolamento de dados entre oficinas.
"""

from oficina.models.base import Base, TenantMixin, TimestampMixin, AuditMixin
from oficina.models.tenant import Tenant
from oficina.models.usuario import Usuario, TipoUsuario
from oficina.models.cliente import Cliente, Veiculo
from oficina.models.fornecedor import Fornecedor
from oficina.models.produto import Produto
from oficina.models.servico import Servico
from oficina.models.ordem_servico import (
    OrdemServico,
    ItemOrdemServico,
    StatusOrdemServico,
    TipoItemOrdem,
)
from oficina.models.estoque import EntradaEstoque
from oficina.models.transacao import Transacao, TipoTransacao, StatusTransacao
from oficina.models.sequencia import Sequencia

__all__ = [
    "Base",
    "TenantMixin",
    "TimestampMixin",
    "AuditMixin",
    "Tenant",
    "Usuario",
    "TipoUsuario",
    "Cliente",
    "Veiculo",
    "Fornecedor",
    "Produto",
    "Servico",
    "OrdemServico",
    "ItemOrdemServico",
    "StatusOrdemServico",
    "TipoItemOrdem",
    "EntradaEstoque",
    "Transacao",
    "TipoTransacao",
    "StatusTransacao",
    "Sequencia",
]
