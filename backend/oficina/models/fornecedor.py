from sqlalchemy import Column, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from oficina.models.base import Base, TenantMixin, TimestampMixin


class Fornecedor(Base, TenantMixin, TimestampMixin):
    """
    Fornecedores de peças

    Criados manualmente ou automaticamente na importação de NF-e
    (emitente da nota). O CNPJ identifica o fornecedor dentro do tenant.
    """
    __tablename__ = "fornecedores"

    id = Column(Integer, primary_key=True, index=True)

    nome = Column(String(200), nullable=False)
    cnpj = Column(String(14), nullable=False)  # Apenas números
    telefone = Column(String(20), nullable=True)
    email = Column(String(200), nullable=True)
    observacoes = Column(Text, nullable=True)

    produtos = relationship("Produto", back_populates="fornecedor")

    def __repr__(self):
        return f"<Fornecedor {self.nome} - CNPJ: {self.cnpj}>"

    __table_args__ = (
        UniqueConstraint('tenant_id', 'cnpj', name='uq_fornecedores_tenant_cnpj'),
    )
