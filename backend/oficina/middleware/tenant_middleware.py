import logging
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from jose import JWTError
from oficina.config import settings
from oficina.core.security import decode_access_token

logger = logging.getLogger(__name__)


class TenantMiddleware(BaseHTTPMiddleware):
    """
    Middleware que identifica o tenant em TODAS as requisições autenticadas

    Fluxo:
    1. Extrai o token JWT do header Authorization
    2. Decodifica o token e obtém tenant_id, user_id e tipo
    3. Adiciona ao contexto da request (request.state)

    As rotas leem esses dados via api/deps.py (get_contexto) e repassam
    explicitamente aos services; nada fica em estado global.

    IMPORTANTE: Este middleware garante que TODAS as requisições
    autenticadas tenham um tenant_id associado, impedindo vazamento de dados
    """

    # Rotas públicas que NÃO precisam de autenticação/tenant
    PUBLIC_PATHS = [
        "/",
        "/health",
        "/docs",
        "/redoc",
        "/openapi.json",
        f"{settings.API_V1_STR}/openapi.json",
        f"{settings.API_V1_STR}/auth/login",
    ]

    @staticmethod
    def _nao_autorizado(detail: str) -> JSONResponse:
        # HTTPException dentro de BaseHTTPMiddleware vira 500; responder direto
        return JSONResponse(status_code=401, content={"detail": detail})

    async def dispatch(self, request: Request, call_next):
        """
        Processa cada requisição antes de chegar nas rotas
        """
        path = request.url.path

        # Permitir requisições OPTIONS (CORS preflight)
        if request.method == "OPTIONS":
            return await call_next(request)

        if path in self.PUBLIC_PATHS or not path.startswith("/api/"):
            return await call_next(request)

        # Rotas protegidas: verificar token
        auth_header = request.headers.get("Authorization", "")

        if not auth_header.startswith("Bearer "):
            return self._nao_autorizado("Token de autenticação não fornecido")

        token = auth_header[len("Bearer "):]

        try:
            payload = decode_access_token(token)
        except JWTError as e:
            logger.info(f"[AUTH] Token recusado em {path}: {e}")
            return self._nao_autorizado(str(e))

        tenant_id = payload.get("tenant_id")
        user_id = payload.get("user_id")

        if not tenant_id:
            return self._nao_autorizado("Token inválido: tenant não identificado")

        if not user_id:
            return self._nao_autorizado("Token inválido: usuário não identificado")

        # Adicionar ao contexto da request
        request.state.tenant_id = tenant_id
        request.state.user_id = user_id
        request.state.user_tipo = payload.get("tipo")

        return await call_next(request)
