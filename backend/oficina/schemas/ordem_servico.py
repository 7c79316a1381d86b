from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from oficina.models.ordem_servico import StatusOrdemServico, TipoItemOrdem
from oficina.schemas.cliente import normalizar_placa


# ============ ITEM OS ============

class ItemOrdemServicoIn(BaseModel):
    """
    Item enviado na gravação da OS

    Item já gravado (id, ou mesmo produto/serviço) mantém a descrição e o
    preço da gravação anterior; item novo é copiado do catálogo. Valores
    informados são edições do operador e prevalecem.
    """
    id: Optional[int] = Field(None, description="Item já gravado nesta OS")
    tipo: TipoItemOrdem
    produto_id: Optional[int] = None
    servico_id: Optional[int] = None
    descricao: Optional[str] = Field(None, min_length=1, max_length=200)
    quantidade: Decimal = Field(Decimal("1"), gt=0)
    preco_unitario: Optional[Decimal] = Field(None, ge=0)

    @model_validator(mode="after")
    def referencia_do_tipo(self):
        # item ja gravado ou snapshot completo dispensam o catalogo
        if self.id or (self.descricao and self.preco_unitario is not None):
            return self
        if self.tipo == TipoItemOrdem.PRODUTO and not self.produto_id:
            raise ValueError("Item do tipo PRODUTO exige produto_id")
        if self.tipo == TipoItemOrdem.SERVICO and not self.servico_id:
            raise ValueError("Item do tipo SERVICO exige servico_id")
        return self


class ItemOrdemServicoResponse(BaseModel):
    id: int
    tipo: TipoItemOrdem
    produto_id: Optional[int] = None
    servico_id: Optional[int] = None
    descricao: str
    quantidade: Decimal
    preco_unitario: Decimal
    subtotal: Decimal

    class Config:
        from_attributes = True


# ============ ORDEM DE SERVICO ============

class OrdemServicoSave(BaseModel):
    """Payload do formulário de OS (criação e edição)"""
    cliente_id: Optional[int] = None
    veiculo_placa: str = Field(..., min_length=7, max_length=10)
    veiculo_marca: Optional[str] = Field(None, max_length=60)
    veiculo_modelo: Optional[str] = Field(None, max_length=100)
    status: StatusOrdemServico = StatusOrdemServico.ABERTO
    observacao: Optional[str] = None
    itens: List[ItemOrdemServicoIn] = Field(default_factory=list)

    @field_validator('veiculo_placa')
    @classmethod
    def placa_normalizada(cls, v):
        return normalizar_placa(v)


class FinalizarOrdemRequest(BaseModel):
    """A finalização é irreversível: baixa estoque e lança a receita"""
    confirmar: bool = Field(False, description="Confirmação explícita do operador")


class OrdemServicoResponse(BaseModel):
    id: int
    tenant_id: int
    numero: str
    cliente_id: Optional[int] = None
    veiculo_placa: str
    veiculo_marca: Optional[str] = None
    veiculo_modelo: Optional[str] = None
    status: StatusOrdemServico
    observacao: Optional[str] = None
    total: Decimal
    data_finalizacao: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    itens: List[ItemOrdemServicoResponse] = []

    class Config:
        from_attributes = True


class OrdemServicoListResponse(BaseModel):
    items: List[OrdemServicoResponse]
    total: int
    page: int
    page_size: int
