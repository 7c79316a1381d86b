"""
Provisiona a oficina e o usuário ADMIN em produção (idempotente).

Uso:
    python scripts/criar_admin.py --email dono@oficina.com.br --senha SenhaForte123 \
        --nome "Nome do Dono" --empresa "Auto Center Exemplo" --cnpj 12.345.678/0001-90

Para trocar a senha de um admin existente, informe também --senha-anterior.
"""
import sys
import os
import argparse
import logging

# Adicionar o diretório raiz ao path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from oficina.database import engine, SessionLocal
from oficina.models import Base
from oficina.schemas.fornecedor import normalizar_cnpj
from oficina.services.admin_bootstrap import garantir_admin, BootstrapError, ResultadoBootstrap

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

MENSAGENS = {
    ResultadoBootstrap.JA_CONFIGURADO: "[!] Admin já configurado, nada a fazer",
    ResultadoBootstrap.SENHA_ROTACIONADA: "[+] Senha do admin atualizada",
    ResultadoBootstrap.CRIADO: "[+] Oficina/admin criados",
}


def create_tables():
    """Criar todas as tabelas no banco"""
    print("[*] Criando tabelas...")
    Base.metadata.create_all(bind=engine)
    print("[+] Tabelas criadas com sucesso!")


def main():
    parser = argparse.ArgumentParser(description="Provisionar oficina e usuário ADMIN")
    parser.add_argument("--email", required=True, help="Email do ADMIN")
    parser.add_argument("--senha", required=True, help="Senha do ADMIN")
    parser.add_argument("--senha-anterior", help="Senha atual, para rotacionar")
    parser.add_argument("--nome", required=True, help="Nome completo do ADMIN")
    parser.add_argument("--empresa", required=True, help="Nome da oficina")
    parser.add_argument("--cnpj", required=True, help="CNPJ da oficina")
    parser.add_argument("--skip-tables", action="store_true", help="Pular criação de tabelas")

    args = parser.parse_args()

    print("=" * 50)
    print("PROVISIONAMENTO DO ADMIN - PRODUÇÃO")
    print("=" * 50)

    if len(args.senha) < 8:
        print("[ERRO] Senha deve ter pelo menos 8 caracteres")
        sys.exit(1)

    cnpj = normalizar_cnpj(args.cnpj)
    if len(cnpj) != 14:
        print("[ERRO] CNPJ deve conter 14 dígitos")
        sys.exit(1)

    if not args.skip_tables:
        create_tables()

    db = SessionLocal()
    try:
        resultado = garantir_admin(
            db,
            email=args.email,
            senha=args.senha,
            nome=args.nome,
            nome_empresa=args.empresa,
            cnpj=cnpj,
            senha_anterior=args.senha_anterior,
        )
    except BootstrapError as e:
        print(f"[ERRO] {e}")
        sys.exit(1)
    finally:
        db.close()

    print(MENSAGENS[resultado])
    print("=" * 50)
    print(f"[*] Login: {args.email.lower()}")
    print("=" * 50)


if __name__ == "__main__":
    main()
