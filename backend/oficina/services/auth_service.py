"""
Autenticacao por email e senha

O email e unico no sistema, entao identifica o usuario e o tenant.
"""
import logging
from typing import Tuple

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from oficina.core.security import verify_password, create_access_token
from oficina.models.tenant import Tenant
from oficina.models.usuario import Usuario

logger = logging.getLogger(__name__)

MSG_CREDENCIAIS = "Email ou senha incorretos"


def autenticar(db: Session, email: str, senha: str) -> Tuple[Usuario, Tenant]:
    """
    Valida as credenciais.

    Raises:
        HTTPException 401: usuario inexistente/inativo, senha errada ou
            oficina inativa (mesma mensagem para nao revelar qual)
    """
    usuario = db.query(Usuario).filter(
        Usuario.email == email.lower(),
        Usuario.ativo == True
    ).first()

    if not usuario or not verify_password(senha, usuario.senha_hash):
        logger.warning(f"[AUTH] Falha de login para {email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=MSG_CREDENCIAIS)

    tenant = db.query(Tenant).filter(Tenant.id == usuario.tenant_id).first()
    if not tenant or not tenant.ativo:
        logger.warning(f"[AUTH] Login recusado para {email}: oficina inativa")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=MSG_CREDENCIAIS)

    logger.info(f"[AUTH] Login de {email} (tenant {tenant.id})")
    return usuario, tenant


def gerar_token(usuario: Usuario) -> str:
    return create_access_token(
        user_id=usuario.id,
        tenant_id=usuario.tenant_id,
        tipo=usuario.tipo.value,
        email=usuario.email,
    )
