from pydantic import BaseModel, Field, EmailStr, field_validator
from typing import Optional
from datetime import datetime
import re


def normalizar_placa(valor: str) -> str:
    """abc-1d23 -> ABC1D23"""
    return re.sub(r'[^A-Za-z0-9]', '', valor or '').upper()


# ============ CLIENTE ============

class ClienteBase(BaseModel):
    nome: str = Field(..., min_length=1, max_length=200)
    documento: Optional[str] = Field(None, description="CPF ou CNPJ")
    telefone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    observacoes: Optional[str] = None

    @field_validator('documento')
    @classmethod
    def validar_documento(cls, v):
        if v is None:
            return v
        v = re.sub(r'\D', '', v)
        if len(v) not in (11, 14):
            raise ValueError('Documento deve ser um CPF (11 dígitos) ou CNPJ (14 dígitos)')
        return v


class ClienteCreate(ClienteBase):
    pass


class ClienteUpdate(BaseModel):
    nome: Optional[str] = Field(None, min_length=1, max_length=200)
    telefone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    observacoes: Optional[str] = None


class ClienteResponse(ClienteBase):
    id: int
    tenant_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class ClienteListResponse(BaseModel):
    total: int
    page: int
    page_size: int
    items: list[ClienteResponse]


# ============ VEICULO ============

class VeiculoBase(BaseModel):
    placa: str = Field(..., min_length=7, max_length=10)
    marca: Optional[str] = Field(None, max_length=60)
    modelo: Optional[str] = Field(None, max_length=100)
    ano: Optional[int] = Field(None, ge=1900, le=2100)
    cor: Optional[str] = Field(None, max_length=30)
    cliente_id: Optional[int] = None

    @field_validator('placa')
    @classmethod
    def validar_placa(cls, v):
        """Aceita padrão antigo (ABC1234) e Mercosul (ABC1D23)"""
        v = normalizar_placa(v)
        if not re.match(r'^[A-Z]{3}\d[A-Z0-9]\d{2}$', v):
            raise ValueError('Placa inválida')
        return v


class VeiculoCreate(VeiculoBase):
    pass


class VeiculoResponse(VeiculoBase):
    id: int
    tenant_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class VeiculoListResponse(BaseModel):
    total: int
    page: int
    page_size: int
    items: list[VeiculoResponse]
