from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from oficina.core.dinheiro import arredondar
from oficina.schemas.fornecedor import normalizar_cnpj


class PreviewNFeRequest(BaseModel):
    """Conteúdo do XML da NF-e e margem de lucro para sugerir o preço de venda"""
    xml: str = Field(..., min_length=1)
    margem_percentual: Optional[Decimal] = Field(None, ge=0, description="Padrão: MARGEM_PADRAO_PERCENTUAL")


class ItemImportacao(BaseModel):
    """
    Item da pré-visualização. Editável pelo operador antes da confirmação
    (nome, quantidade, custo, preço de venda).
    """
    sku: str = Field(..., min_length=1, max_length=60)
    nome: str = Field(..., min_length=1, max_length=200)
    preco_custo: Decimal = Field(..., ge=0)
    preco_venda: Decimal = Field(..., ge=0)
    quantidade: Decimal = Field(..., gt=0)
    unidade: str = Field("UN", max_length=10)

    @field_validator('preco_venda')
    @classmethod
    def centavos(cls, v):
        return arredondar(v)


class ImportacaoNFe(BaseModel):
    """Dados da nota + itens revisados: entrada de confirmar_importacao"""
    fornecedor_nome: str = Field(..., min_length=1, max_length=200)
    fornecedor_cnpj: str
    chave: str = Field(..., min_length=1, max_length=60)
    valor_total: Decimal = Field(..., ge=0, description="vNF declarado na nota")
    itens: List[ItemImportacao] = Field(..., min_length=1)

    @field_validator('fornecedor_cnpj')
    @classmethod
    def cnpj_normalizado(cls, v):
        v = normalizar_cnpj(v)
        if len(v) != 14:
            raise ValueError('CNPJ do emitente deve conter 14 dígitos')
        return v

    @field_validator('valor_total')
    @classmethod
    def centavos(cls, v):
        return arredondar(v)


class PreviewNFeResponse(ImportacaoNFe):
    margem_percentual: Decimal


class EntradaEstoqueResponse(BaseModel):
    id: int
    tenant_id: int
    fornecedor_id: int
    chave_nfe: str
    valor_total: Decimal
    valor_itens: Decimal
    quantidade_itens: int
    created_at: datetime
    divergencia: Decimal = Decimal("0.00")
    transacao_id: Optional[int] = None
    produtos_criados: int = 0
    produtos_atualizados: int = 0

    class Config:
        from_attributes = True
