from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from oficina.models.base import Base, TenantMixin, TimestampMixin, AuditMixin


class EntradaEstoque(Base, TenantMixin, TimestampMixin, AuditMixin):
    """
    Registro de auditoria de uma importação de NF-e

    valor_total é o vNF declarado na nota (valor da conta a pagar);
    valor_itens é a soma custo x quantidade efetivamente gravada, que pode
    divergir quando o operador edita os custos na pré-visualização.
    """
    __tablename__ = "entradas_estoque"

    id = Column(Integer, primary_key=True, index=True)

    fornecedor_id = Column(Integer, ForeignKey("fornecedores.id"), nullable=False)
    chave_nfe = Column(String(60), nullable=False)

    valor_total = Column(Numeric(12, 2), nullable=False)
    valor_itens = Column(Numeric(12, 2), nullable=False)
    quantidade_itens = Column(Integer, nullable=False, default=0)

    fornecedor = relationship("Fornecedor")

    def __repr__(self):
        return f"<EntradaEstoque {self.chave_nfe}>"

    __table_args__ = (
        UniqueConstraint('tenant_id', 'chave_nfe', name='uq_entradas_estoque_tenant_chave'),
    )
