"""
Rotas de Clientes e Veículos
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from oficina.api.deps import get_db, get_contexto
from oficina.core.contexto import ContextoRequisicao
from oficina.models.cliente import Cliente, Veiculo
from oficina.schemas.cliente import (
    ClienteCreate,
    ClienteUpdate,
    ClienteResponse,
    ClienteListResponse,
    VeiculoCreate,
    VeiculoResponse,
    VeiculoListResponse,
    normalizar_placa
)
from oficina.api.utils import (
    get_by_id, validate_fk, validate_unique,
    paginate_response, apply_search_filter, update_entity
)

router = APIRouter()
veiculos_router = APIRouter()


# ============ CLIENTES ============

@router.post("/", response_model=ClienteResponse, status_code=201)
def criar_cliente(
    cliente: ClienteCreate,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Cadastrar cliente"""
    db_cliente = Cliente(**cliente.model_dump(), tenant_id=contexto.tenant_id)
    db.add(db_cliente)
    db.commit()
    db.refresh(db_cliente)
    return db_cliente


@router.get("/", response_model=ClienteListResponse)
def listar_clientes(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    busca: Optional[str] = Query(None, description="Buscar por nome, documento ou telefone"),
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    query = db.query(Cliente).filter(Cliente.tenant_id == contexto.tenant_id)
    query = apply_search_filter(query, busca, Cliente.nome, Cliente.documento, Cliente.telefone)
    return paginate_response(query, page, page_size, Cliente.nome)


@router.get("/{cliente_id}", response_model=ClienteResponse)
def obter_cliente(
    cliente_id: int,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    return get_by_id(db, Cliente, cliente_id, contexto.tenant_id, error_message="Cliente não encontrado")


@router.put("/{cliente_id}", response_model=ClienteResponse)
def atualizar_cliente(
    cliente_id: int,
    cliente_update: ClienteUpdate,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    cliente = get_by_id(db, Cliente, cliente_id, contexto.tenant_id, error_message="Cliente não encontrado")
    return update_entity(db, cliente, cliente_update)


@router.get("/{cliente_id}/veiculos", response_model=list[VeiculoResponse])
def listar_veiculos_cliente(
    cliente_id: int,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Veículos do cliente"""
    get_by_id(db, Cliente, cliente_id, contexto.tenant_id, error_message="Cliente não encontrado")
    return db.query(Veiculo).filter(
        Veiculo.tenant_id == contexto.tenant_id,
        Veiculo.cliente_id == cliente_id
    ).order_by(Veiculo.placa).all()


# ============ VEICULOS ============

@veiculos_router.post("/", response_model=VeiculoResponse, status_code=201)
def criar_veiculo(
    veiculo: VeiculoCreate,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Cadastrar veículo (placa única por oficina)"""
    validate_unique(db, Veiculo, "placa", veiculo.placa, contexto.tenant_id, display_name="Placa")
    if veiculo.cliente_id:
        validate_fk(db, Cliente, veiculo.cliente_id, contexto.tenant_id, "Cliente")

    db_veiculo = Veiculo(**veiculo.model_dump(), tenant_id=contexto.tenant_id)
    db.add(db_veiculo)
    db.commit()
    db.refresh(db_veiculo)
    return db_veiculo


@veiculos_router.get("/", response_model=VeiculoListResponse)
def listar_veiculos(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    placa: Optional[str] = Query(None, description="Placa (com ou sem hífen)"),
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    query = db.query(Veiculo).filter(Veiculo.tenant_id == contexto.tenant_id)
    if placa:
        query = apply_search_filter(query, normalizar_placa(placa), Veiculo.placa)
    return paginate_response(query, page, page_size, Veiculo.placa)


@veiculos_router.get("/{veiculo_id}", response_model=VeiculoResponse)
def obter_veiculo(
    veiculo_id: int,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    return get_by_id(db, Veiculo, veiculo_id, contexto.tenant_id, error_message="Veículo não encontrado")
