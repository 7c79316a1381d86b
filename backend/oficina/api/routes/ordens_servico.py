"""
Rotas de Ordens de Serviço

Fluxo:
1. POST / (ou PUT /{id}) grava a OS com a lista completa de itens
2. POST /{id}/itens e DELETE /{id}/itens/{posicao} ajustam itens avulsos
3. POST /{id}/finalizar conclui: baixa estoque e lança a receita
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload
from typing import Optional
from oficina.api.deps import get_db, get_contexto
from oficina.core.contexto import ContextoRequisicao
from oficina.models.ordem_servico import OrdemServico, StatusOrdemServico
from oficina.schemas.ordem_servico import (
    OrdemServicoSave,
    OrdemServicoResponse,
    OrdemServicoListResponse,
    ItemOrdemServicoIn,
    FinalizarOrdemRequest
)
from oficina.api.utils import paginate_response
from oficina.schemas.cliente import normalizar_placa
from oficina.services import ordem_servico_service

router = APIRouter()


@router.post("/", response_model=OrdemServicoResponse, status_code=201)
def criar_ordem(
    dados: OrdemServicoSave,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Abrir nova OS"""
    return ordem_servico_service.salvar_ordem(db, contexto, dados)


@router.get("/", response_model=OrdemServicoListResponse)
def listar_ordens(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: Optional[StatusOrdemServico] = Query(None),
    busca: Optional[str] = Query(None, description="Número da OS ou placa"),
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Listar OS (mais recentes primeiro)"""
    query = db.query(OrdemServico).options(selectinload(OrdemServico.itens)).filter(
        OrdemServico.tenant_id == contexto.tenant_id
    )
    if status:
        query = query.filter(OrdemServico.status == status)
    if busca:
        # placa gravada normalizada: "abc-1d23" encontra ABC1D23
        query = query.filter(or_(
            OrdemServico.numero.ilike(f"%{busca}%"),
            OrdemServico.veiculo_placa.ilike(f"%{normalizar_placa(busca)}%")
        ))

    return paginate_response(
        query, page, page_size,
        (OrdemServico.created_at.desc(), OrdemServico.id.desc())
    )


@router.get("/{ordem_id}", response_model=OrdemServicoResponse)
def obter_ordem(
    ordem_id: int,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    return ordem_servico_service.carregar_ordem(db, contexto, ordem_id)


@router.put("/{ordem_id}", response_model=OrdemServicoResponse)
def atualizar_ordem(
    ordem_id: int,
    dados: OrdemServicoSave,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Regravar a OS: os itens passam a ser exatamente os enviados"""
    return ordem_servico_service.salvar_ordem(db, contexto, dados, ordem_id=ordem_id)


@router.post("/{ordem_id}/itens", response_model=OrdemServicoResponse)
def adicionar_item(
    ordem_id: int,
    item: ItemOrdemServicoIn,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    return ordem_servico_service.adicionar_item(db, contexto, ordem_id, item)


@router.delete("/{ordem_id}/itens/{posicao}", response_model=OrdemServicoResponse)
def remover_item(
    ordem_id: int,
    posicao: int,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Remove o item pela posição na lista (0 = primeiro)"""
    return ordem_servico_service.remover_item(db, contexto, ordem_id, posicao)


@router.post("/{ordem_id}/finalizar", response_model=OrdemServicoResponse)
def finalizar_ordem(
    ordem_id: int,
    dados: FinalizarOrdemRequest,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """
    Finalizar OS (irreversível)

    Exige {"confirmar": true}. Baixa o estoque das peças e lança a receita
    pendente no financeiro; OS já concluída ou cancelada retorna 409.
    """
    return ordem_servico_service.finalizar_ordem(db, contexto, ordem_id, dados.confirmar)
