from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, Enum as SQLEnum, Index
from oficina.models.base import Base, TenantMixin, TimestampMixin, AuditMixin, agora
import enum


class TipoTransacao(str, enum.Enum):
    RECEITA = "RECEITA"    # Conta a receber
    DESPESA = "DESPESA"    # Conta a pagar


class StatusTransacao(str, enum.Enum):
    PENDENTE = "PENDENTE"
    PAGO = "PAGO"


class Transacao(Base, TenantMixin, TimestampMixin, AuditMixin):
    """
    Lançamento do livro financeiro (contas a pagar / receber)

    Gerado automaticamente pela finalização de OS (RECEITA) e pela
    importação de NF-e (DESPESA), ou manualmente no painel financeiro.
    """
    __tablename__ = "transacoes"

    id = Column(Integer, primary_key=True, index=True)

    descricao = Column(String(255), nullable=False)
    tipo = Column(SQLEnum(TipoTransacao), nullable=False)
    categoria = Column(String(60), nullable=False, default="Geral")
    valor = Column(Numeric(12, 2), nullable=False)
    status = Column(SQLEnum(StatusTransacao), default=StatusTransacao.PENDENTE, nullable=False)

    data = Column(DateTime(timezone=True), default=agora, nullable=False)  # lançamento / pagamento
    data_vencimento = Column(Date, nullable=True)

    # Origem
    ordem_servico_id = Column(Integer, ForeignKey("ordens_servico.id"), nullable=True, index=True)
    entrada_estoque_id = Column(Integer, ForeignKey("entradas_estoque.id"), nullable=True, index=True)

    def __repr__(self):
        return f"<Transacao {self.tipo.value} {self.valor}>"

    __table_args__ = (
        Index('idx_transacoes_tenant_tipo_status', 'tenant_id', 'tipo', 'status'),
    )
