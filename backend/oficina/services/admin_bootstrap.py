"""
Provisionamento idempotente do administrador de uma oficina

Pode ser executado a cada deploy: so cria o que falta e so troca a senha
quando quem roda o script conhece a senha anterior.
"""
import enum
import logging
import re
from typing import Optional

from sqlalchemy.orm import Session

from oficina.core.security import hash_password, verify_password
from oficina.models.tenant import Tenant
from oficina.models.usuario import Usuario, TipoUsuario

logger = logging.getLogger(__name__)


class ResultadoBootstrap(str, enum.Enum):
    JA_CONFIGURADO = "JA_CONFIGURADO"        # senha atual ja funciona
    SENHA_ROTACIONADA = "SENHA_ROTACIONADA"  # senha anterior trocada pela atual
    CRIADO = "CRIADO"                        # oficina e/ou admin criados


class BootstrapError(Exception):
    """Usuario existe mas nenhuma das senhas informadas confere"""


def _slug(texto: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", texto.lower()).strip("-")[:50] or "oficina"


def garantir_admin(
    db: Session,
    email: str,
    senha: str,
    nome: str,
    nome_empresa: str,
    cnpj: str,
    senha_anterior: Optional[str] = None
) -> ResultadoBootstrap:
    """
    Garante que existe um ADMIN com email/senha informados.

    1. login com a senha atual funciona -> nada a fazer
    2. login com a senha anterior funciona -> grava a senha atual
    3. usuario nao existe -> cria a oficina (se preciso) e o admin

    Raises:
        BootstrapError: o usuario existe mas nenhuma senha confere
    """
    email = email.lower()
    usuario = db.query(Usuario).filter(Usuario.email == email).first()

    if usuario:
        if verify_password(senha, usuario.senha_hash):
            logger.info(f"[STARTUP] Admin {email} ja configurado")
            return ResultadoBootstrap.JA_CONFIGURADO

        if senha_anterior and verify_password(senha_anterior, usuario.senha_hash):
            usuario.senha_hash = hash_password(senha)
            db.commit()
            logger.info(f"[STARTUP] Senha do admin {email} atualizada")
            return ResultadoBootstrap.SENHA_ROTACIONADA

        raise BootstrapError(f"Usuário {email} já existe e nenhuma das senhas informadas confere")

    tenant = db.query(Tenant).filter(Tenant.cnpj == cnpj).first()
    if not tenant:
        tenant = Tenant(
            nome_empresa=nome_empresa,
            cnpj=cnpj,
            slug=_slug(nome_empresa),
            email_contato=email,
            ativo=True,
        )
        db.add(tenant)
        db.flush()
        logger.info(f"[STARTUP] Oficina criada: {nome_empresa} (ID: {tenant.id})")

    db.add(Usuario(
        tenant_id=tenant.id,
        nome_completo=nome,
        email=email,
        senha_hash=hash_password(senha),
        tipo=TipoUsuario.ADMIN,
        ativo=True,
    ))
    db.commit()
    logger.info(f"[STARTUP] Admin {email} criado na oficina {tenant.id}")
    return ResultadoBootstrap.CRIADO
