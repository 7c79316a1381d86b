from sqlalchemy import Column, Integer, String, Boolean, Enum as SQLEnum
import enum
from oficina.models.base import Base, TenantMixin, TimestampMixin


class TipoUsuario(str, enum.Enum):
    """
    Perfis da equipe da oficina
    """
    ADMIN = "ADMIN"              # Dono / gerente - acesso total ao tenant
    FUNCIONARIO = "FUNCIONARIO"  # Mecanico / atendente - opera OS e estoque


class Usuario(Base, TenantMixin, TimestampMixin):
    """
    Usuários do sistema

    IMPORTANTE: Cada usuário pertence a UM ÚNICO tenant.
    O email é único no sistema inteiro porque o login é feito só por email.
    """
    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, index=True)

    nome_completo = Column(String(200), nullable=False)
    email = Column(String(200), nullable=False, unique=True, index=True)
    senha_hash = Column(String(255), nullable=False)  # bcrypt

    tipo = Column(SQLEnum(TipoUsuario), default=TipoUsuario.FUNCIONARIO, nullable=False)
    ativo = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Usuario {self.nome_completo} ({self.email})>"
