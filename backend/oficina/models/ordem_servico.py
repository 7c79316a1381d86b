from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, Enum as SQLEnum, Index
from sqlalchemy.orm import relationship
from oficina.models.base import Base, TenantMixin, TimestampMixin, AuditMixin
from oficina.core.dinheiro import arredondar
import enum


class StatusOrdemServico(str, enum.Enum):
    ABERTO = "ABERTO"
    EM_ANDAMENTO = "EM_ANDAMENTO"
    CONCLUIDO = "CONCLUIDO"
    CANCELADO = "CANCELADO"


class TipoItemOrdem(str, enum.Enum):
    PRODUTO = "PRODUTO"
    SERVICO = "SERVICO"


class OrdemServico(Base, TenantMixin, TimestampMixin, AuditMixin):
    """
    Ordem de Serviço (OS) - unidade de trabalho sobre um veículo

    Fluxo:
    ABERTO -> EM_ANDAMENTO -> CONCLUIDO
    CANCELADO a partir de ABERTO ou EM_ANDAMENTO

    CONCLUIDO só é atingido pela finalização, que baixa o estoque das peças
    e lança a receita. Uma OS concluída não é mais editada.
    """
    __tablename__ = "ordens_servico"

    id = Column(Integer, primary_key=True, index=True)

    # Identificacao
    numero = Column(String(20), nullable=False, index=True)  # OS-AAAA-NNNNN

    cliente_id = Column(Integer, ForeignKey("clientes.id"), nullable=True)

    # Veículo (cópia dos dados no momento da abertura)
    veiculo_placa = Column(String(10), nullable=False)
    veiculo_marca = Column(String(60), nullable=True)
    veiculo_modelo = Column(String(100), nullable=True)

    status = Column(SQLEnum(StatusOrdemServico), default=StatusOrdemServico.ABERTO, nullable=False)
    observacao = Column(Text, nullable=True)

    # Total desnormalizado, recalculado a cada gravação
    total = Column(Numeric(12, 2), nullable=False, default=0)

    data_finalizacao = Column(DateTime(timezone=True), nullable=True)

    cliente = relationship("Cliente")
    itens = relationship(
        "ItemOrdemServico",
        back_populates="ordem",
        cascade="all, delete-orphan",
        order_by="ItemOrdemServico.id",
    )

    def __repr__(self):
        return f"<OrdemServico {self.numero} - {self.veiculo_placa}>"

    __table_args__ = (
        Index('idx_ordens_servico_tenant_status', 'tenant_id', 'status'),
        Index('idx_ordens_servico_tenant_placa', 'tenant_id', 'veiculo_placa'),
    )


class ItemOrdemServico(Base, TenantMixin):
    """
    Item da OS (peça ou serviço)

    descricao e preco_unitario são cópias do catálogo no momento da inclusão:
    mudanças posteriores de preço no catálogo não alteram OS existentes.
    """
    __tablename__ = "itens_ordem_servico"

    id = Column(Integer, primary_key=True, index=True)

    ordem_servico_id = Column(Integer, ForeignKey("ordens_servico.id"), nullable=False, index=True)

    tipo = Column(SQLEnum(TipoItemOrdem), nullable=False)
    produto_id = Column(Integer, ForeignKey("produtos.id", ondelete="SET NULL"), nullable=True)
    servico_id = Column(Integer, ForeignKey("servicos.id", ondelete="SET NULL"), nullable=True)

    descricao = Column(String(200), nullable=False)
    quantidade = Column(Numeric(15, 4), nullable=False, default=1)
    preco_unitario = Column(Numeric(12, 2), nullable=False, default=0)

    ordem = relationship("OrdemServico", back_populates="itens")
    produto = relationship("Produto")
    servico = relationship("Servico")

    @property
    def subtotal(self):
        return arredondar(self.quantidade * self.preco_unitario)
