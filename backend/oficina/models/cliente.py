from sqlalchemy import Column, Integer, String, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from oficina.models.base import Base, TenantMixin, TimestampMixin


class Cliente(Base, TenantMixin, TimestampMixin):
    """
    Clientes da oficina (donos dos veículos)
    """
    __tablename__ = "clientes"

    id = Column(Integer, primary_key=True, index=True)

    nome = Column(String(200), nullable=False)
    documento = Column(String(14), nullable=True)  # CPF ou CNPJ, apenas números
    telefone = Column(String(20), nullable=True)
    email = Column(String(200), nullable=True)
    observacoes = Column(Text, nullable=True)

    veiculos = relationship("Veiculo", back_populates="cliente")

    def __repr__(self):
        return f"<Cliente {self.nome}>"


class Veiculo(Base, TenantMixin, TimestampMixin):
    """
    Veículos cadastrados

    A placa é gravada normalizada (maiúsculas, sem hífen): ABC1D23
    """
    __tablename__ = "veiculos"

    id = Column(Integer, primary_key=True, index=True)

    placa = Column(String(10), nullable=False)
    marca = Column(String(60), nullable=True)
    modelo = Column(String(100), nullable=True)
    ano = Column(Integer, nullable=True)
    cor = Column(String(30), nullable=True)

    cliente_id = Column(Integer, ForeignKey('clientes.id'), nullable=True)

    cliente = relationship("Cliente", back_populates="veiculos")

    def __repr__(self):
        return f"<Veiculo {self.placa}>"

    __table_args__ = (
        UniqueConstraint('tenant_id', 'placa', name='uq_veiculos_tenant_placa'),
    )
