"""
Update Helpers - aplicação de schemas parciais sobre entidades
"""
from typing import TypeVar, List, Union
from sqlalchemy.orm import Session
from pydantic import BaseModel

T = TypeVar('T')


def update_entity(
    db: Session,
    entity: T,
    update_data: Union[BaseModel, dict],
    exclude_fields: List[str] = None,
    commit: bool = True
) -> T:
    """
    Atualiza entidade com os campos enviados (exclude_unset).

    Aceita o schema Pydantic de atualização ou um dict já filtrado.

    Usage:
        produto = update_entity(db, produto, produto_update)
        servico = update_entity(db, servico, {"preco": novo_preco})
    """
    if isinstance(update_data, BaseModel):
        data = update_data.model_dump(exclude_unset=True)
    else:
        data = dict(update_data)

    for field in exclude_fields or []:
        data.pop(field, None)

    for field, value in data.items():
        if hasattr(entity, field):
            setattr(entity, field, value)

    if commit:
        db.commit()
        db.refresh(entity)

    return entity
