from sqlalchemy import Column, Integer, String, Boolean
from oficina.models.base import Base, TimestampMixin


class Tenant(Base, TimestampMixin):
    """
    Representa uma oficina cliente do SaaS (Multi-Tenant)

    Cada tenant é uma empresa independente com:
    - Seus próprios usuários (equipe)
    - Seu próprio estoque, catálogo de serviços e ordens de serviço
    - Seu próprio livro financeiro (contas a pagar / receber)
    """
    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, index=True)

    # Identificação
    nome_empresa = Column(String(200), nullable=False)
    cnpj = Column(String(14), unique=True, nullable=False, index=True)
    slug = Column(String(50), unique=True, nullable=False, index=True)

    # Status da conta
    ativo = Column(Boolean, default=True, nullable=False)

    # Contato
    email_contato = Column(String(200), nullable=False)
    telefone = Column(String(20), nullable=True)

    def __repr__(self):
        return f"<Tenant {self.nome_empresa} (ID: {self.id})>"
