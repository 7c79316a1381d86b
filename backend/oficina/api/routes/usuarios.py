"""
Rotas de Gestão da Equipe

Apenas o ADMIN da oficina consulta e gerencia usuários do próprio tenant.
O cadastro de novos usuários é feito fora da API (scripts/criar_admin.py
para o ADMIN).
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from oficina.api.deps import get_db, get_contexto, require_admin
from oficina.core.contexto import ContextoRequisicao
from oficina.api.utils import get_by_id, update_entity
from oficina.models.usuario import Usuario, TipoUsuario
from oficina.schemas.usuario import UsuarioUpdate, UsuarioResponse

router = APIRouter()


@router.get("/", response_model=List[UsuarioResponse])
def listar_usuarios(
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto),
    current_user: Usuario = Depends(require_admin)
):
    """Listar a equipe da oficina"""
    return db.query(Usuario).filter(
        Usuario.tenant_id == contexto.tenant_id
    ).order_by(Usuario.nome_completo).all()


@router.put("/{usuario_id}", response_model=UsuarioResponse)
def atualizar_usuario(
    usuario_id: int,
    data: UsuarioUpdate,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto),
    current_user: Usuario = Depends(require_admin)
):
    """Alterar nome, perfil ou ativar/desativar"""
    usuario = get_by_id(db, Usuario, usuario_id, contexto.tenant_id, error_message="Usuário não encontrado")

    if usuario.id == current_user.id and (data.ativo is False or data.tipo == TipoUsuario.FUNCIONARIO):
        raise HTTPException(status_code=400, detail="Não é possível desativar ou rebaixar o próprio usuário")

    return update_entity(db, usuario, data)
