"""
Rotas do catálogo de Serviços (mão de obra)
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from oficina.api.deps import get_db, get_contexto
from oficina.core.contexto import ContextoRequisicao
from oficina.models.servico import Servico
from oficina.schemas.servico import ServicoCreate, ServicoUpdate, ServicoResponse, ServicoListResponse
from oficina.api.utils import get_by_id, paginate_response, apply_search_filter, update_entity

router = APIRouter()


@router.post("/", response_model=ServicoResponse, status_code=201)
def criar_servico(
    servico: ServicoCreate,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    db_servico = Servico(**servico.model_dump(), tenant_id=contexto.tenant_id)
    db.add(db_servico)
    db.commit()
    db.refresh(db_servico)
    return db_servico


@router.get("/", response_model=ServicoListResponse)
def listar_servicos(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    busca: Optional[str] = Query(None),
    ativo: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    query = db.query(Servico).filter(Servico.tenant_id == contexto.tenant_id)
    query = apply_search_filter(query, busca, Servico.nome, Servico.descricao)
    if ativo is not None:
        query = query.filter(Servico.ativo == ativo)
    return paginate_response(query, page, page_size, Servico.nome)


@router.get("/{servico_id}", response_model=ServicoResponse)
def obter_servico(
    servico_id: int,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    return get_by_id(db, Servico, servico_id, contexto.tenant_id, error_message="Serviço não encontrado")


@router.put("/{servico_id}", response_model=ServicoResponse)
def atualizar_servico(
    servico_id: int,
    servico_update: ServicoUpdate,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Mudanças de preço valem só para OS gravadas depois"""
    servico = get_by_id(db, Servico, servico_id, contexto.tenant_id, error_message="Serviço não encontrado")
    return update_entity(db, servico, servico_update)


@router.delete("/{servico_id}", status_code=204)
def deletar_servico(
    servico_id: int,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    servico = get_by_id(db, Servico, servico_id, contexto.tenant_id, error_message="Serviço não encontrado")
    db.delete(servico)
    db.commit()
    return None
