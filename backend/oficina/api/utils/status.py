"""
Status Helpers - validação de status de entidades (OS, transações)
"""
from typing import TypeVar, Union, List
from enum import Enum
from fastapi import HTTPException

T = TypeVar('T')


def require_status(
    entity: T,
    required: Union[Enum, List[Enum]],
    operation: str = None,
    status_code: int = 400
) -> None:
    """
    Valida que entidade está em um dos status requeridos.

    Usage:
        require_status(transacao, StatusTransacao.PENDENTE, "Baixa", status_code=409)
    """
    allowed = required if isinstance(required, list) else [required]

    if entity.status not in allowed:
        allowed_str = ", ".join(s.value for s in allowed)
        msg = f"{operation or 'Operação'} não permitida no status {entity.status.value}"
        msg += f". Status permitido(s): {allowed_str}"
        raise HTTPException(status_code=status_code, detail=msg)


def forbid_status(
    entity: T,
    forbidden: Union[Enum, List[Enum]],
    operation: str = None,
    status_code: int = 400
) -> None:
    """
    Valida que entidade NÃO está em status proibido.

    Usage:
        forbid_status(ordem, StatusOrdemServico.CONCLUIDO, "Edição")
        forbid_status(ordem, [StatusOrdemServico.CONCLUIDO, StatusOrdemServico.CANCELADO], "Finalização", 409)
    """
    blocked = forbidden if isinstance(forbidden, list) else [forbidden]

    if entity.status in blocked:
        msg = f"{operation or 'Operação'} não permitida no status {entity.status.value}"
        raise HTTPException(status_code=status_code, detail=msg)
