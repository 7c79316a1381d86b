from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
import bcrypt
from oficina.config import settings


def hash_password(password: str) -> str:
    """
    Gera hash da senha usando bcrypt
    """
    hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verifica se a senha corresponde ao hash
    """
    if not plain_password or not hashed_password:
        return False
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def create_access_token(
    user_id: int,
    tenant_id: int,
    tipo: str,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Cria o JWT da sessao do usuario

    IMPORTANTE: O token SEMPRE carrega:
    - user_id: ID do usuário
    - tenant_id: ID da oficina (isolamento entre empresas)
    - tipo: perfil do usuário (ADMIN / FUNCIONARIO)
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload: Dict[str, Any] = {
        "user_id": user_id,
        "tenant_id": tenant_id,
        "tipo": tipo,
        "exp": expire,
    }
    if email:
        payload["email"] = email

    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decodifica e valida um JWT token

    Raises:
        JWTError: Se o token for inválido ou expirado
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        raise JWTError(f"Token inválido: {str(e)}")
