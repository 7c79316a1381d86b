"""
Database Helpers - consultas sempre restritas ao tenant da requisição
"""
from typing import Type, TypeVar, Optional, Any
from sqlalchemy.orm import Session
from fastapi import HTTPException

T = TypeVar('T')


def get_by_id(
    db: Session,
    model: Type[T],
    entity_id: int,
    tenant_id: int,
    raise_not_found: bool = True,
    error_message: str = None,
    options: list = None
) -> Optional[T]:
    """
    Busca entidade por ID dentro do tenant.

    Registros de outro tenant se comportam como inexistentes (404), sem
    revelar que existem.

    Usage:
        produto = get_by_id(db, Produto, produto_id, tenant_id)
        ordem = get_by_id(db, OrdemServico, id, tenant_id, options=[selectinload(OrdemServico.itens)])
    """
    query = db.query(model).filter(
        model.id == entity_id,
        model.tenant_id == tenant_id
    )

    for opt in options or []:
        query = query.options(opt)

    entity = query.first()

    if not entity and raise_not_found:
        msg = error_message or f"{model.__name__} não encontrado"
        raise HTTPException(status_code=404, detail=msg)

    return entity


def validate_fk(
    db: Session,
    model: Type[T],
    fk_id: int,
    tenant_id: int,
    field_name: str = None
) -> T:
    """
    Valida que a FK informada existe no mesmo tenant.

    Usage:
        validate_fk(db, Cliente, dados.cliente_id, tenant_id, "Cliente")
    """
    entity = db.query(model).filter(
        model.id == fk_id,
        model.tenant_id == tenant_id
    ).first()

    if not entity:
        name = field_name or model.__name__
        raise HTTPException(status_code=404, detail=f"{name} não encontrado")

    return entity


def validate_unique(
    db: Session,
    model: Type[T],
    field_name: str,
    field_value: Any,
    tenant_id: int,
    exclude_id: int = None,
    display_name: str = None
) -> None:
    """
    Valida unicidade de campo dentro do tenant (409 se já existir).

    Usage:
        validate_unique(db, Fornecedor, "cnpj", cnpj, tenant_id, display_name="CNPJ")
        validate_unique(db, Veiculo, "placa", placa, tenant_id, exclude_id=veiculo.id)
    """
    field = getattr(model, field_name)
    query = db.query(model).filter(
        field == field_value,
        model.tenant_id == tenant_id
    )

    if exclude_id:
        query = query.filter(model.id != exclude_id)

    if query.first():
        name = display_name or field_name
        raise HTTPException(status_code=409, detail=f"{name} já cadastrado")
