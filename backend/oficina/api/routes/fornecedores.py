"""
Rotas de Fornecedores
Criados aqui ou automaticamente na importação de NF-e
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional
from oficina.api.deps import get_db, get_contexto
from oficina.core.contexto import ContextoRequisicao
from oficina.models.fornecedor import Fornecedor
from oficina.models.produto import Produto
from oficina.models.estoque import EntradaEstoque
from oficina.schemas.fornecedor import (
    FornecedorCreate,
    FornecedorUpdate,
    FornecedorResponse,
    FornecedorListResponse,
    normalizar_cnpj
)
from oficina.api.utils import (
    get_by_id, validate_unique,
    paginate_query, apply_search_filter, update_entity
)

router = APIRouter()


@router.post("/", response_model=FornecedorResponse, status_code=201)
def criar_fornecedor(
    fornecedor: FornecedorCreate,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Criar novo fornecedor"""
    validate_unique(db, Fornecedor, "cnpj", fornecedor.cnpj, contexto.tenant_id, display_name="CNPJ")

    db_fornecedor = Fornecedor(**fornecedor.model_dump(), tenant_id=contexto.tenant_id)
    db.add(db_fornecedor)
    db.commit()
    db.refresh(db_fornecedor)
    return db_fornecedor


@router.get("/", response_model=FornecedorListResponse)
def listar_fornecedores(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    busca: Optional[str] = Query(None, description="Buscar por nome ou CNPJ"),
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Listar fornecedores com paginação"""
    query = db.query(Fornecedor).filter(Fornecedor.tenant_id == contexto.tenant_id)

    if busca:
        cnpj = normalizar_cnpj(busca)
        if cnpj:
            query = query.filter(
                Fornecedor.nome.ilike(f"%{busca}%") | Fornecedor.cnpj.ilike(f"%{cnpj}%")
            )
        else:
            query = apply_search_filter(query, busca, Fornecedor.nome)

    items, total = paginate_query(query, page, page_size, Fornecedor.nome)
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.get("/{fornecedor_id}", response_model=FornecedorResponse)
def obter_fornecedor(
    fornecedor_id: int,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Obter detalhes de um fornecedor específico"""
    return get_by_id(db, Fornecedor, fornecedor_id, contexto.tenant_id, error_message="Fornecedor não encontrado")


@router.put("/{fornecedor_id}", response_model=FornecedorResponse)
def atualizar_fornecedor(
    fornecedor_id: int,
    fornecedor_update: FornecedorUpdate,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Atualizar fornecedor existente (o CNPJ não muda)"""
    fornecedor = get_by_id(db, Fornecedor, fornecedor_id, contexto.tenant_id, error_message="Fornecedor não encontrado")
    return update_entity(db, fornecedor, fornecedor_update)


@router.delete("/{fornecedor_id}", status_code=204)
def deletar_fornecedor(
    fornecedor_id: int,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Deletar fornecedor sem produtos nem notas vinculados"""
    fornecedor = get_by_id(db, Fornecedor, fornecedor_id, contexto.tenant_id, error_message="Fornecedor não encontrado")

    vinculado = (
        db.query(Produto.id).filter(Produto.tenant_id == contexto.tenant_id, Produto.fornecedor_id == fornecedor_id).first()
        or db.query(EntradaEstoque.id).filter(
            EntradaEstoque.tenant_id == contexto.tenant_id, EntradaEstoque.fornecedor_id == fornecedor_id
        ).first()
    )
    if vinculado:
        raise HTTPException(status_code=409, detail="Fornecedor possui produtos ou notas vinculados")

    db.delete(fornecedor)
    db.commit()
    return None
