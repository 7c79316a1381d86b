from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from oficina.models.transacao import TipoTransacao, StatusTransacao


class AbaFinanceiro(str, Enum):
    VISAO_GERAL = "visao_geral"   # lançamentos pagos mais recentes
    PAGAR = "pagar"               # despesas pendentes
    RECEBER = "receber"           # receitas pendentes


class TransacaoCreate(BaseModel):
    """Conta a pagar / receber lançada manualmente (sempre PENDENTE)"""
    descricao: str = Field(..., min_length=1, max_length=255)
    tipo: TipoTransacao
    valor: Decimal = Field(..., gt=0)
    categoria: str = Field("Geral", max_length=60)
    data_vencimento: Optional[date] = None


class TransacaoResponse(BaseModel):
    id: int
    tenant_id: int
    descricao: str
    tipo: TipoTransacao
    categoria: str
    valor: Decimal
    status: StatusTransacao
    data: datetime
    data_vencimento: Optional[date] = None
    ordem_servico_id: Optional[int] = None
    entrada_estoque_id: Optional[int] = None

    class Config:
        from_attributes = True


class TransacaoListResponse(BaseModel):
    items: List[TransacaoResponse]
    total: int


class ResumoFinanceiro(BaseModel):
    receitas: Decimal
    despesas: Decimal
    saldo: Decimal
    pendente_pagar: Decimal
    pendente_receber: Decimal
