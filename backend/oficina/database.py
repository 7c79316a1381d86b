from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from oficina.config import settings

# SQLite (testes/desenvolvimento local) nao compartilha conexao entre threads por padrao
_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# Engine do SQLAlchemy
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verifica conexões antes de usar
    connect_args=_connect_args,
    echo=True if settings.ENVIRONMENT == "development" else False  # Log SQL em dev
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base para os models
Base = declarative_base()


def get_db():
    """
    Dependency para obter sessão do banco de dados
    Usado no FastAPI Depends
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
