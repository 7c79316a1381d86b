from pydantic import BaseModel, Field, EmailStr, field_validator
from typing import Optional
from datetime import datetime
import re


def normalizar_cnpj(valor: str) -> str:
    """Remove pontuação: 12.345.678/0001-90 -> 12345678000190"""
    return re.sub(r'\D', '', valor or '')


class FornecedorBase(BaseModel):
    """Schema base para Fornecedor"""
    nome: str = Field(..., min_length=1, max_length=200, description="Razão social / nome")
    cnpj: str = Field(..., description="CNPJ (pontuação é removida)")
    telefone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    observacoes: Optional[str] = None

    @field_validator('cnpj')
    @classmethod
    def validar_cnpj(cls, v):
        """CNPJ deve ter 14 dígitos"""
        v = normalizar_cnpj(v)
        if not re.match(r'^\d{14}$', v):
            raise ValueError('CNPJ deve conter exatamente 14 dígitos numéricos')
        return v


class FornecedorCreate(FornecedorBase):
    """Schema para criação de fornecedor"""
    pass


class FornecedorUpdate(BaseModel):
    """Schema para atualização de fornecedor (campos opcionais)"""
    nome: Optional[str] = Field(None, min_length=1, max_length=200)
    telefone: Optional[str] = Field(None, max_length=20)
    email: Optional[EmailStr] = None
    observacoes: Optional[str] = None


class FornecedorResponse(FornecedorBase):
    """Schema para resposta da API"""
    id: int
    tenant_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class FornecedorListResponse(BaseModel):
    """Schema para listagem paginada"""
    total: int
    page: int
    page_size: int
    items: list[FornecedorResponse]
