from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ContextoRequisicao:
    """
    Contexto da requisicao autenticada

    Montado uma vez por requisicao a partir do token (ver api/deps.py) e
    passado explicitamente para todos os services. Nenhum service le o
    tenant de estado global.
    """
    tenant_id: int
    usuario_id: Optional[int] = None
    tipo_usuario: Optional[str] = None
