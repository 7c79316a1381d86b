import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from oficina.config import settings
from oficina.middleware.tenant_middleware import TenantMiddleware
from oficina.api.routes import (
    auth, usuarios, clientes, produtos, servicos, fornecedores,
    ordens_servico, importacoes, financeiro
)

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configurar CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middleware de Tenant (decodifica o JWT de toda rota /api/ protegida)
app.add_middleware(TenantMiddleware)


# Rota de health check
@app.get("/health")
def health_check():
    """Health check para monitoramento"""
    return {"status": "healthy"}


@app.get("/")
def root():
    return {
        "message": "Oficina Multi-Tenant API",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT
    }


# Incluir routers
app.include_router(auth.router, prefix=f"{settings.API_V1_STR}/auth", tags=["auth"])
app.include_router(usuarios.router, prefix=f"{settings.API_V1_STR}/usuarios", tags=["usuarios"])
app.include_router(clientes.router, prefix=f"{settings.API_V1_STR}/clientes", tags=["clientes"])
app.include_router(clientes.veiculos_router, prefix=f"{settings.API_V1_STR}/veiculos", tags=["veiculos"])
app.include_router(produtos.router, prefix=f"{settings.API_V1_STR}/produtos", tags=["produtos"])
app.include_router(servicos.router, prefix=f"{settings.API_V1_STR}/servicos", tags=["servicos"])
app.include_router(fornecedores.router, prefix=f"{settings.API_V1_STR}/fornecedores", tags=["fornecedores"])
app.include_router(ordens_servico.router, prefix=f"{settings.API_V1_STR}/ordens-servico", tags=["ordens-servico"])
app.include_router(importacoes.router, prefix=f"{settings.API_V1_STR}/importacoes", tags=["importacoes"])
app.include_router(financeiro.router, prefix=f"{settings.API_V1_STR}/financeiro", tags=["financeiro"])


@app.on_event("startup")
def startup_event():
    logger.info(f"[STARTUP] {settings.PROJECT_NAME} iniciado!")
    logger.info(f"[STARTUP] Ambiente: {settings.ENVIRONMENT}")

    if settings.ENVIRONMENT == "test":
        return

    # Criar tabelas do banco de dados automaticamente
    from oficina.database import engine
    from oficina.models import Base
    Base.metadata.create_all(bind=engine)
    logger.info("[STARTUP] Tabelas do banco de dados criadas/verificadas!")


@app.on_event("shutdown")
def shutdown_event():
    logger.info("[SHUTDOWN] Sistema encerrado!")
