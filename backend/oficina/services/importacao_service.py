"""
Confirmacao da importacao de NF-e

Fornecedor (cria se nao existe) -> produtos (cria ou repoe estoque e
atualiza precos) -> entrada de estoque -> conta a pagar. Tudo em uma unica
transacao.
"""
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy.orm import Session

from oficina.core.contexto import ContextoRequisicao
from oficina.core.dinheiro import arredondar, ZERO, formatar_reais
from oficina.core.unidade_trabalho import unidade_de_trabalho
from oficina.models.estoque import EntradaEstoque
from oficina.models.fornecedor import Fornecedor
from oficina.models.produto import Produto
from oficina.models.transacao import Transacao, TipoTransacao, StatusTransacao
from oficina.schemas.importacao import ImportacaoNFe, ItemImportacao
from oficina.services.estoque_service import repor_estoque

logger = logging.getLogger(__name__)

CATEGORIA_COMPRA_ESTOQUE = "Compra de Estoque"


@dataclass
class ResultadoImportacao:
    entrada: EntradaEstoque
    transacao: Transacao
    produtos_criados: int = 0
    produtos_atualizados: int = 0

    @property
    def divergencia(self) -> Decimal:
        """Total declarado na nota menos a soma dos itens gravados"""
        return arredondar(self.entrada.valor_total - self.entrada.valor_itens)


def obter_ou_criar_fornecedor(
    db: Session,
    contexto: ContextoRequisicao,
    cnpj: str,
    nome: str
) -> Fornecedor:
    fornecedor = db.query(Fornecedor).filter(
        Fornecedor.tenant_id == contexto.tenant_id,
        Fornecedor.cnpj == cnpj
    ).first()

    if fornecedor:
        return fornecedor

    fornecedor = Fornecedor(tenant_id=contexto.tenant_id, nome=nome, cnpj=cnpj)
    db.add(fornecedor)
    # Importacao concorrente do mesmo emitente cai na unique (tenant_id, cnpj)
    db.flush()
    logger.info(f"[IMPORTACAO] Fornecedor criado: {nome} ({cnpj})")
    return fornecedor


def _gravar_item(
    db: Session,
    contexto: ContextoRequisicao,
    fornecedor: Fornecedor,
    item: ItemImportacao
) -> bool:
    """Retorna True se o produto foi criado, False se ja existia"""
    produto = db.query(Produto).filter(
        Produto.tenant_id == contexto.tenant_id,
        Produto.sku == item.sku,
        Produto.fornecedor_id == fornecedor.id
    ).first()

    if produto:
        repor_estoque(db, contexto, produto.id, item.quantidade)
        produto.preco_custo = item.preco_custo
        produto.preco_venda = item.preco_venda
        db.flush()
        return False

    db.add(Produto(
        tenant_id=contexto.tenant_id,
        sku=item.sku,
        nome=item.nome,
        unidade=item.unidade,
        preco_custo=item.preco_custo,
        preco_venda=item.preco_venda,
        quantidade=item.quantidade,
        fornecedor_id=fornecedor.id,
    ))
    # SKU repetido na mesma nota encontra o produto recem criado
    db.flush()
    return True


def confirmar_importacao(
    db: Session,
    contexto: ContextoRequisicao,
    dados: ImportacaoNFe
) -> ResultadoImportacao:
    """
    Grava a NF-e revisada pelo operador.

    A conta a pagar usa o total declarado na nota (vNF). A soma dos itens
    gravados fica em valor_itens; divergencia entre os dois e registrada
    em log e devolvida ao chamador.

    Raises:
        HTTPException 409: chave de acesso ja importada neste tenant
    """
    with unidade_de_trabalho(db, f"importação da NF-e {dados.chave}"):
        ja_importada = db.query(EntradaEstoque.id).filter(
            EntradaEstoque.tenant_id == contexto.tenant_id,
            EntradaEstoque.chave_nfe == dados.chave
        ).first()
        if ja_importada:
            raise HTTPException(status_code=409, detail=f"NF-e {dados.chave} já foi importada")

        fornecedor = obter_ou_criar_fornecedor(db, contexto, dados.fornecedor_cnpj, dados.fornecedor_nome)

        criados = atualizados = 0
        valor_itens = ZERO
        for item in dados.itens:
            if _gravar_item(db, contexto, fornecedor, item):
                criados += 1
            else:
                atualizados += 1
            valor_itens += item.preco_custo * item.quantidade

        entrada = EntradaEstoque(
            tenant_id=contexto.tenant_id,
            fornecedor_id=fornecedor.id,
            chave_nfe=dados.chave,
            valor_total=dados.valor_total,
            valor_itens=arredondar(valor_itens),
            quantidade_itens=len(dados.itens),
            created_by=contexto.usuario_id,
        )
        db.add(entrada)
        db.flush()

        transacao = Transacao(
            tenant_id=contexto.tenant_id,
            descricao=f"Compra de Estoque - {fornecedor.nome}",
            tipo=TipoTransacao.DESPESA,
            categoria=CATEGORIA_COMPRA_ESTOQUE,
            valor=dados.valor_total,
            status=StatusTransacao.PENDENTE,
            data_vencimento=date.today(),
            entrada_estoque_id=entrada.id,
            created_by=contexto.usuario_id,
        )
        db.add(transacao)

    db.refresh(entrada)
    db.refresh(transacao)

    resultado = ResultadoImportacao(
        entrada=entrada,
        transacao=transacao,
        produtos_criados=criados,
        produtos_atualizados=atualizados,
    )
    if resultado.divergencia != ZERO:
        logger.warning(
            f"[IMPORTACAO] NF-e {dados.chave}: total declarado {formatar_reais(entrada.valor_total)} "
            f"difere da soma dos itens {formatar_reais(entrada.valor_itens)}"
        )
    logger.info(
        f"[IMPORTACAO] NF-e {dados.chave} confirmada (tenant {contexto.tenant_id}): "
        f"{criados} produto(s) criado(s), {atualizados} atualizado(s)"
    )
    return resultado
