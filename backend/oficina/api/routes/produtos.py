"""
Rotas de Produtos (estoque de peças)
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from oficina.api.deps import get_db, get_contexto
from oficina.core.contexto import ContextoRequisicao
from oficina.models.produto import Produto
from oficina.models.fornecedor import Fornecedor
from oficina.schemas.produto import (
    ProdutoCreate,
    ProdutoUpdate,
    ProdutoResponse,
    ProdutoListResponse,
    ProdutoAjusteEstoque
)
from oficina.api.utils import (
    get_by_id, validate_fk,
    paginate_query, apply_search_filter, update_entity
)
from oficina.services.estoque_service import ajustar_estoque

router = APIRouter()


@router.post("/", response_model=ProdutoResponse, status_code=201)
def criar_produto(
    produto: ProdutoCreate,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Criar novo produto"""
    if produto.fornecedor_id:
        validate_fk(db, Fornecedor, produto.fornecedor_id, contexto.tenant_id, "Fornecedor")

    db_produto = Produto(**produto.model_dump(), tenant_id=contexto.tenant_id)
    db.add(db_produto)
    db.commit()
    db.refresh(db_produto)
    return db_produto


@router.get("/", response_model=ProdutoListResponse)
def listar_produtos(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    busca: Optional[str] = Query(None, description="Buscar por SKU, nome ou descrição"),
    fornecedor_id: Optional[int] = Query(None),
    estoque_baixo: bool = Query(False, description="Apenas produtos com estoque abaixo do mínimo"),
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Listar produtos com paginação e filtros"""
    query = db.query(Produto).filter(Produto.tenant_id == contexto.tenant_id)

    # Filtros
    if busca:
        query = apply_search_filter(query, busca, Produto.sku, Produto.nome, Produto.descricao)
    if fornecedor_id is not None:
        query = query.filter(Produto.fornecedor_id == fornecedor_id)
    if estoque_baixo:
        query = query.filter(Produto.quantidade < Produto.estoque_minimo)

    items, total = paginate_query(query, page, page_size, Produto.nome)
    return {"items": items, "total": total, "page": page, "page_size": page_size}


@router.get("/{produto_id}", response_model=ProdutoResponse)
def obter_produto(
    produto_id: int,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Obter detalhes de um produto específico"""
    return get_by_id(db, Produto, produto_id, contexto.tenant_id, error_message="Produto não encontrado")


@router.put("/{produto_id}", response_model=ProdutoResponse)
def atualizar_produto(
    produto_id: int,
    produto_update: ProdutoUpdate,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Atualizar produto existente (preços, nome, fornecedor)"""
    produto = get_by_id(db, Produto, produto_id, contexto.tenant_id, error_message="Produto não encontrado")

    if produto_update.fornecedor_id is not None:
        validate_fk(db, Fornecedor, produto_update.fornecedor_id, contexto.tenant_id, "Fornecedor")

    return update_entity(db, produto, produto_update)


@router.patch("/{produto_id}/estoque", response_model=ProdutoResponse)
def ajustar_estoque_produto(
    produto_id: int,
    ajuste: ProdutoAjusteEstoque,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Ajuste manual de inventário (entrada ou saída)"""
    return ajustar_estoque(db, contexto, produto_id, ajuste.delta, ajuste.motivo)


@router.delete("/{produto_id}", status_code=204)
def deletar_produto(
    produto_id: int,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Deletar produto"""
    produto = get_by_id(db, Produto, produto_id, contexto.tenant_id, error_message="Produto não encontrado")
    db.delete(produto)
    db.commit()
    return None
