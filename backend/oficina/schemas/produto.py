from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
from oficina.core.dinheiro import arredondar


class ProdutoBase(BaseModel):
    """Schema base para Produto"""
    sku: Optional[str] = Field(None, max_length=60, description="Código do produto (cProd da NF-e)")
    nome: str = Field(..., min_length=1, max_length=200, description="Nome do produto")
    descricao: Optional[str] = None
    unidade: str = Field("UN", max_length=10, description="Unidade (UN, L, KG, CX...)")
    preco_custo: Decimal = Field(Decimal("0"), ge=0)
    preco_venda: Decimal = Field(Decimal("0"), ge=0)
    estoque_minimo: Decimal = Field(Decimal("0"), ge=0)
    fornecedor_id: Optional[int] = None

    @field_validator('preco_venda')
    @classmethod
    def centavos(cls, v):
        return arredondar(v)


class ProdutoCreate(ProdutoBase):
    """Schema para criação de produto"""
    quantidade: Decimal = Field(Decimal("0"), ge=0, description="Estoque inicial")


class ProdutoUpdate(BaseModel):
    """
    Schema para atualização de produto (campos opcionais)

    A quantidade não é editável aqui: estoque só muda por importação de NF-e,
    finalização de OS ou ajuste explícito (PATCH /estoque).
    """
    sku: Optional[str] = Field(None, max_length=60)
    nome: Optional[str] = Field(None, min_length=1, max_length=200)
    descricao: Optional[str] = None
    unidade: Optional[str] = Field(None, max_length=10)
    preco_custo: Optional[Decimal] = Field(None, ge=0)
    preco_venda: Optional[Decimal] = Field(None, ge=0)
    estoque_minimo: Optional[Decimal] = Field(None, ge=0)
    fornecedor_id: Optional[int] = None


class ProdutoAjusteEstoque(BaseModel):
    """Ajuste manual (inventário): soma delta à quantidade atual"""
    delta: Decimal = Field(..., description="Positivo para entrada, negativo para saída")
    motivo: Optional[str] = Field(None, max_length=200)


class ProdutoResponse(ProdutoBase):
    """Schema para resposta da API"""
    id: int
    tenant_id: int
    quantidade: Decimal
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProdutoListResponse(BaseModel):
    """Schema para listagem paginada"""
    total: int
    page: int
    page_size: int
    items: list[ProdutoResponse]
