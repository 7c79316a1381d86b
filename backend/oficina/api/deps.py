from fastapi import Depends, Request, HTTPException
from sqlalchemy.orm import Session
from oficina.database import get_db
from oficina.core.contexto import ContextoRequisicao
from oficina.models.usuario import Usuario, TipoUsuario

__all__ = [
    "get_db",
    "get_current_tenant_id",
    "get_current_user_id",
    "get_current_user",
    "get_contexto",
    "require_admin",
]


def get_current_tenant_id(request: Request) -> int:
    """
    Extrai tenant_id do contexto da request (configurado pelo middleware)
    """
    if getattr(request.state, 'tenant_id', None) is None:
        raise HTTPException(status_code=401, detail="Tenant não identificado")
    return request.state.tenant_id


def get_current_user_id(request: Request) -> int:
    """
    Extrai user_id do contexto da request
    """
    if getattr(request.state, 'user_id', None) is None:
        raise HTTPException(status_code=401, detail="Usuário não identificado")
    return request.state.user_id


def get_contexto(
    request: Request,
    tenant_id: int = Depends(get_current_tenant_id),
    user_id: int = Depends(get_current_user_id)
) -> ContextoRequisicao:
    """
    Contexto explicito repassado aos services (tenant, usuario, perfil)
    """
    return ContextoRequisicao(
        tenant_id=tenant_id,
        usuario_id=user_id,
        tipo_usuario=getattr(request.state, 'user_tipo', None)
    )


def get_current_user(
    user_id: int = Depends(get_current_user_id),
    tenant_id: int = Depends(get_current_tenant_id),
    db: Session = Depends(get_db)
) -> Usuario:
    """
    Retorna objeto Usuario completo do usuário atual
    Valida se o usuário pertence ao tenant e está ativo
    """
    user = db.query(Usuario).filter_by(
        id=user_id,
        tenant_id=tenant_id,
        ativo=True
    ).first()

    if not user:
        raise HTTPException(
            status_code=404,
            detail="Usuário não encontrado ou inativo"
        )

    return user


def require_admin(
    user: Usuario = Depends(get_current_user)
) -> Usuario:
    """
    Dependency que requer que o usuário seja ADMIN da oficina
    """
    if user.tipo != TipoUsuario.ADMIN:
        raise HTTPException(
            status_code=403,
            detail="Acesso negado: apenas administradores"
        )
    return user
