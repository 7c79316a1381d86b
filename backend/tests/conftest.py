"""
Fixtures dos testes do backend da oficina.

Banco SQLite em memória (StaticPool: uma única conexão compartilhada entre a
sessão dos testes e as sessões abertas pelas rotas), tabelas recriadas a
cada teste, duas oficinas para verificar isolamento entre tenants.
"""
import os

# Antes de qualquer import de oficina.*: settings e engine leem o ambiente
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from oficina.main import app
from oficina.database import get_db
from oficina.core.contexto import ContextoRequisicao
from oficina.core.security import hash_password, create_access_token
from oficina.models import (
    Base, Tenant, Usuario, TipoUsuario, Produto, Servico, Fornecedor
)

SENHA_PADRAO = "Senha123!"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db():
    """Sessão com schema recém-criado"""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _criar_tenant(db, nome, cnpj, slug):
    tenant = Tenant(nome_empresa=nome, cnpj=cnpj, slug=slug, email_contato=f"contato@{slug}.com.br")
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    return tenant


def _criar_usuario(db, tenant, email, tipo=TipoUsuario.ADMIN):
    usuario = Usuario(
        tenant_id=tenant.id,
        nome_completo=f"Usuario {email.split('@')[0]}",
        email=email,
        senha_hash=hash_password(SENHA_PADRAO),
        tipo=tipo,
        ativo=True,
    )
    db.add(usuario)
    db.commit()
    db.refresh(usuario)
    return usuario


def _headers(usuario):
    token = create_access_token(usuario.id, usuario.tenant_id, usuario.tipo.value, usuario.email)
    return {"Authorization": f"Bearer {token}"}


# ============ TENANTS / USUARIOS ============

@pytest.fixture()
def tenant_a(db):
    return _criar_tenant(db, "Auto Center Alfa", "11111111000111", "alfa")


@pytest.fixture()
def tenant_b(db):
    return _criar_tenant(db, "Oficina Beta", "22222222000122", "beta")


@pytest.fixture()
def admin_a(db, tenant_a):
    return _criar_usuario(db, tenant_a, "admin@alfa.com.br")


@pytest.fixture()
def funcionario_a(db, tenant_a):
    return _criar_usuario(db, tenant_a, "mecanico@alfa.com.br", TipoUsuario.FUNCIONARIO)


@pytest.fixture()
def admin_b(db, tenant_b):
    return _criar_usuario(db, tenant_b, "admin@beta.com.br")


@pytest.fixture()
def headers_a(admin_a):
    return _headers(admin_a)


@pytest.fixture()
def headers_funcionario_a(funcionario_a):
    return _headers(funcionario_a)


@pytest.fixture()
def headers_b(admin_b):
    return _headers(admin_b)


@pytest.fixture()
def contexto_a(admin_a):
    return ContextoRequisicao(tenant_id=admin_a.tenant_id, usuario_id=admin_a.id, tipo_usuario="ADMIN")


@pytest.fixture()
def contexto_b(admin_b):
    return ContextoRequisicao(tenant_id=admin_b.tenant_id, usuario_id=admin_b.id, tipo_usuario="ADMIN")


# ============ CATALOGO ============

@pytest.fixture()
def fornecedor_a(db, tenant_a):
    fornecedor = Fornecedor(tenant_id=tenant_a.id, nome="Distribuidora Pecas Sul", cnpj="33333333000133")
    db.add(fornecedor)
    db.commit()
    db.refresh(fornecedor)
    return fornecedor


@pytest.fixture()
def filtro_oleo(db, tenant_a, fornecedor_a):
    produto = Produto(
        tenant_id=tenant_a.id,
        sku="PSL55",
        nome="Filtro de oleo PSL 55",
        preco_custo=Decimal("18.00"),
        preco_venda=Decimal("25.00"),
        quantidade=Decimal("5"),
        fornecedor_id=fornecedor_a.id,
    )
    db.add(produto)
    db.commit()
    db.refresh(produto)
    return produto


@pytest.fixture()
def oleo_5w30(db, tenant_a):
    produto = Produto(
        tenant_id=tenant_a.id,
        sku="5W30",
        nome="Oleo 5W30 sintetico (litro)",
        unidade="L",
        preco_custo=Decimal("32.00"),
        preco_venda=Decimal("45.90"),
        quantidade=Decimal("20"),
    )
    db.add(produto)
    db.commit()
    db.refresh(produto)
    return produto


@pytest.fixture()
def troca_oleo(db, tenant_a):
    servico = Servico(tenant_id=tenant_a.id, nome="Troca de oleo", preco=Decimal("60.00"))
    db.add(servico)
    db.commit()
    db.refresh(servico)
    return servico


@pytest.fixture()
def alinhamento(db, tenant_a):
    servico = Servico(tenant_id=tenant_a.id, nome="Alinhamento e balanceamento", preco=Decimal("150.00"))
    db.add(servico)
    db.commit()
    db.refresh(servico)
    return servico


# ============ NF-E ============

def montar_nfe_xml(itens, chave="NFe35260133333333000133550010000012341000012345",
                   cnpj="33.333.333/0001-33", nome="Distribuidora Pecas Sul", vnf=None, raiz_proc=True):
    """XML de NF-e (namespace do portal fiscal) com os itens (cProd, xProd, qCom, vUnCom, uCom)"""
    dets = "".join(
        f'<det nItem="{n}"><prod><cProd>{sku}</cProd><xProd>{nome_item}</xProd>'
        f'<uCom>{unidade}</uCom><qCom>{qtd}</qCom><vUnCom>{custo}</vUnCom></prod></det>'
        for n, (sku, nome_item, qtd, custo, unidade) in enumerate(itens, start=1)
    )
    if vnf is None:
        vnf = sum(Decimal(qtd) * Decimal(custo) for _, _, qtd, custo, _ in itens)
    nfe = (
        '<NFe xmlns="http://www.portalfiscal.inf.br/nfe">'
        f'<infNFe Id="{chave}" versao="4.00">'
        f'<emit><CNPJ>{cnpj}</CNPJ><xNome>{nome}</xNome></emit>'
        f'{dets}'
        f'<total><ICMSTot><vProd>{vnf}</vProd><vNF>{vnf}</vNF></ICMSTot></total>'
        '</infNFe></NFe>'
    )
    if raiz_proc:
        return (
            '<?xml version="1.0" encoding="UTF-8"?>'
            f'<nfeProc xmlns="http://www.portalfiscal.inf.br/nfe" versao="4.00">{nfe}</nfeProc>'
        )
    return nfe


@pytest.fixture()
def nfe_xml():
    return montar_nfe_xml
