from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from oficina.models.usuario import TipoUsuario


class UsuarioResponse(BaseModel):
    """Schema de resposta para Usuario (SEM senha!)"""
    id: int
    tenant_id: int
    nome_completo: str
    email: EmailStr
    tipo: TipoUsuario
    ativo: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UsuarioLogin(BaseModel):
    """Schema para login (o tenant é identificado pelo próprio usuário)"""
    email: EmailStr
    senha: str = Field(..., min_length=1)


class TenantResumo(BaseModel):
    id: int
    nome_empresa: str
    slug: str


class Token(BaseModel):
    """Schema de resposta para autenticação"""
    access_token: str
    token_type: str = "bearer"
    user: UsuarioResponse
    tenant: TenantResumo
    expires_in_minutes: Optional[int] = None


class UsuarioUpdate(BaseModel):
    nome_completo: Optional[str] = Field(None, min_length=3, max_length=200)
    tipo: Optional[TipoUsuario] = None
    ativo: Optional[bool] = None
