from sqlalchemy import Column, Integer, String, Text, Numeric, Boolean, Index
from oficina.models.base import Base, TenantMixin, TimestampMixin


class Servico(Base, TenantMixin, TimestampMixin):
    """
    Catálogo de serviços (mão de obra)

    Exemplos:
    - Troca de óleo
    - Alinhamento e balanceamento
    - Revisão de freios
    """
    __tablename__ = "servicos"

    id = Column(Integer, primary_key=True, index=True)

    nome = Column(String(200), nullable=False)
    descricao = Column(Text, nullable=True)
    preco = Column(Numeric(12, 2), nullable=False, default=0)
    ativo = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Servico {self.nome}>"

    __table_args__ = (
        Index('idx_servicos_tenant_nome', 'tenant_id', 'nome'),
    )
