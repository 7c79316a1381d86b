from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal


class ServicoBase(BaseModel):
    nome: str = Field(..., min_length=1, max_length=200)
    descricao: Optional[str] = None
    preco: Decimal = Field(..., ge=0, decimal_places=2)
    ativo: bool = True


class ServicoCreate(ServicoBase):
    pass


class ServicoUpdate(BaseModel):
    nome: Optional[str] = Field(None, min_length=1, max_length=200)
    descricao: Optional[str] = None
    preco: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    ativo: Optional[bool] = None


class ServicoResponse(ServicoBase):
    id: int
    tenant_id: int
    created_at: datetime

    class Config:
        from_attributes = True


class ServicoListResponse(BaseModel):
    total: int
    page: int
    page_size: int
    items: list[ServicoResponse]
