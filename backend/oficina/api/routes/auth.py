from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from oficina.api.deps import get_db, get_current_user
from oficina.models.usuario import Usuario
from oficina.schemas.usuario import UsuarioLogin, Token, UsuarioResponse
from oficina.services.auth_service import autenticar, gerar_token
from oficina.config import settings

router = APIRouter()


@router.post("/login", response_model=Token)
def login(
    credentials: UsuarioLogin,
    db: Session = Depends(get_db)
):
    """
    Autenticação de usuário

    Fluxo:
    1. Busca o usuário ativo pelo email (único no sistema)
    2. Verifica a senha e se a oficina está ativa
    3. Gera JWT token com tenant_id, user_id e tipo
    """
    usuario, tenant = autenticar(db, credentials.email, credentials.senha)

    return {
        "access_token": gerar_token(usuario),
        "token_type": "bearer",
        "user": UsuarioResponse.model_validate(usuario),
        "tenant": {
            "id": tenant.id,
            "nome_empresa": tenant.nome_empresa,
            "slug": tenant.slug
        },
        "expires_in_minutes": settings.ACCESS_TOKEN_EXPIRE_MINUTES
    }


@router.get("/me", response_model=UsuarioResponse)
def me(usuario: Usuario = Depends(get_current_user)):
    """Usuário autenticado"""
    return usuario
