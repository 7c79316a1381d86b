from sqlalchemy import Column, Integer, String, Text, Numeric, ForeignKey, Index
from sqlalchemy.orm import relationship
from oficina.models.base import Base, TenantMixin, TimestampMixin


class Produto(Base, TenantMixin, TimestampMixin):
    """
    Peças e insumos em estoque

    Exemplos:
    - Filtro de óleo PSL 55
    - Pastilha de freio dianteira
    - Óleo 5W30 sintético (litro)

    A quantidade só é alterada por UPDATE atômico no banco
    (quantidade = quantidade +/- q), nunca por leitura seguida de escrita.
    """
    __tablename__ = "produtos"

    id = Column(Integer, primary_key=True, index=True)

    # Identificação
    sku = Column(String(60), nullable=True)  # cProd da NF-e ou código interno
    nome = Column(String(200), nullable=False)
    descricao = Column(Text, nullable=True)
    unidade = Column(String(10), nullable=False, default="UN")

    # Preços
    preco_custo = Column(Numeric(18, 10), nullable=False, default=0)  # vUnCom da NF-e, sem arredondar
    preco_venda = Column(Numeric(12, 2), nullable=False, default=0)

    # Estoque
    quantidade = Column(Numeric(15, 4), nullable=False, default=0)
    estoque_minimo = Column(Numeric(15, 4), nullable=False, default=0)

    fornecedor_id = Column(Integer, ForeignKey('fornecedores.id'), nullable=True)

    fornecedor = relationship("Fornecedor", back_populates="produtos")

    def __repr__(self):
        return f"<Produto {self.sku} - {self.nome}>"

    __table_args__ = (
        Index('idx_produtos_tenant_sku_fornecedor', 'tenant_id', 'sku', 'fornecedor_id'),
        Index('idx_produtos_tenant_nome', 'tenant_id', 'nome'),
    )
