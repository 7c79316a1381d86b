"""
Rotas de Importação de NF-e (entrada de estoque)

Fluxo em duas etapas:
1. POST /preview lê o XML e devolve itens com preço de venda sugerido
2. O operador revisa/edita e envia para POST /confirmar
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from oficina.api.deps import get_db, get_contexto
from oficina.api.utils import paginate_response
from oficina.core.contexto import ContextoRequisicao
from oficina.models.estoque import EntradaEstoque
from oficina.schemas.importacao import (
    PreviewNFeRequest,
    PreviewNFeResponse,
    ImportacaoNFe,
    EntradaEstoqueResponse
)
from oficina.services.nfe_parser import parsear_nfe, NFeParseError
from oficina.services.importacao_service import confirmar_importacao

router = APIRouter()


@router.post("/preview", response_model=PreviewNFeResponse)
def preview_nfe(
    dados: PreviewNFeRequest,
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Ler XML da NF-e sem gravar nada"""
    try:
        preview = parsear_nfe(dados.xml, dados.margem_percentual)
    except NFeParseError as e:
        raise HTTPException(status_code=400, detail=f"Erro ao processar XML: {e}")

    return {
        "fornecedor_nome": preview.fornecedor_nome,
        "fornecedor_cnpj": preview.fornecedor_cnpj,
        "chave": preview.chave,
        "valor_total": preview.valor_total,
        "margem_percentual": preview.margem_percentual,
        "itens": [vars(item) for item in preview.itens],
    }


@router.post("/confirmar", response_model=EntradaEstoqueResponse, status_code=201)
def confirmar(
    dados: ImportacaoNFe,
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """
    Confirmar importação revisada

    Cria fornecedor/produtos, repõe estoque, registra a entrada e lança a
    conta a pagar. Chave de acesso já importada retorna 409.
    """
    resultado = confirmar_importacao(db, contexto, dados)
    resposta = EntradaEstoqueResponse.model_validate(resultado.entrada)
    resposta.divergencia = resultado.divergencia
    resposta.transacao_id = resultado.transacao.id
    resposta.produtos_criados = resultado.produtos_criados
    resposta.produtos_atualizados = resultado.produtos_atualizados
    return resposta


@router.get("/entradas")
def listar_entradas(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    contexto: ContextoRequisicao = Depends(get_contexto)
):
    """Histórico de notas importadas"""
    query = db.query(EntradaEstoque).filter(EntradaEstoque.tenant_id == contexto.tenant_id)
    resposta = paginate_response(query, page, page_size, (EntradaEstoque.created_at.desc(), EntradaEstoque.id.desc()))
    resposta["items"] = [EntradaEstoqueResponse.model_validate(e) for e in resposta["items"]]
    return resposta
