"""
Ciclo de vida da Ordem de Servico

- calcular_total: soma quantidade x preco_unitario dos itens
- salvar_ordem: cria/edita a OS substituindo todos os itens (replace-all)
- adicionar_item / remover_item: manutencao de itens de uma OS gravada
- finalizar_ordem: CONCLUIDO + baixa de estoque das pecas + receita

Cada operacao de escrita roda em uma unica transacao (unidade_de_trabalho).
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from fastapi import HTTPException
from sqlalchemy.orm import Session, selectinload

from oficina.api.utils import get_by_id, validate_fk, forbid_status, generate_sequential_number, Prefixes
from oficina.core.contexto import ContextoRequisicao
from oficina.core.dinheiro import arredondar, para_decimal, ZERO, formatar_reais
from oficina.core.unidade_trabalho import unidade_de_trabalho
from oficina.models.base import agora
from oficina.models.cliente import Cliente
from oficina.models.ordem_servico import OrdemServico, ItemOrdemServico, StatusOrdemServico, TipoItemOrdem
from oficina.models.produto import Produto
from oficina.models.servico import Servico
from oficina.models.transacao import Transacao, TipoTransacao, StatusTransacao
from oficina.schemas.ordem_servico import OrdemServicoSave, ItemOrdemServicoIn
from oficina.services.estoque_service import baixar_estoque

logger = logging.getLogger(__name__)

CATEGORIA_RECEITA_OS = "Servico"

# Status aceitos no formulario; CONCLUIDO so pela finalizacao
STATUS_EDITAVEIS = [StatusOrdemServico.ABERTO, StatusOrdemServico.EM_ANDAMENTO, StatusOrdemServico.CANCELADO]


def _campo(item: Any, nome: str):
    if isinstance(item, dict):
        return item.get(nome)
    return getattr(item, nome)


def calcular_total(itens: Iterable[Any]) -> Decimal:
    """
    Total da OS: soma de quantidade x preco_unitario, em centavos.

    Aceita itens do banco, schemas ou dicts. Lista vazia -> 0.00
    """
    total = sum(
        (para_decimal(_campo(i, "quantidade")) * para_decimal(_campo(i, "preco_unitario")) for i in itens),
        ZERO
    )
    return arredondar(total)


def carregar_ordem(db: Session, contexto: ContextoRequisicao, ordem_id: int) -> OrdemServico:
    return get_by_id(
        db, OrdemServico, ordem_id, contexto.tenant_id,
        error_message="Ordem de serviço não encontrada",
        options=[selectinload(OrdemServico.itens)]
    )


def item_do_catalogo(
    db: Session,
    contexto: ContextoRequisicao,
    tipo: TipoItemOrdem,
    referencia_id: int,
    quantidade: Decimal = Decimal("1")
) -> ItemOrdemServico:
    """
    Novo item (ainda nao gravado) com nome e preco copiados do catalogo.
    """
    if tipo == TipoItemOrdem.PRODUTO:
        produto = get_by_id(db, Produto, referencia_id, contexto.tenant_id, error_message="Produto não encontrado")
        return ItemOrdemServico(
            tenant_id=contexto.tenant_id,
            tipo=TipoItemOrdem.PRODUTO,
            produto_id=produto.id,
            descricao=produto.nome,
            quantidade=quantidade,
            preco_unitario=arredondar(produto.preco_venda),
        )

    servico = get_by_id(db, Servico, referencia_id, contexto.tenant_id, error_message="Serviço não encontrado")
    return ItemOrdemServico(
        tenant_id=contexto.tenant_id,
        tipo=TipoItemOrdem.SERVICO,
        servico_id=servico.id,
        descricao=servico.nome,
        quantidade=quantidade,
        preco_unitario=arredondar(servico.preco),
    )


def _referencia(item: Any):
    return _campo(item, "produto_id") if _campo(item, "tipo") == TipoItemOrdem.PRODUTO else _campo(item, "servico_id")


class _ItensGravados:
    """
    Itens da OS antes da regravacao, consumidos um a um.

    Casamento por id explicito ou, sem id, pelo mesmo produto/servico.
    """

    def __init__(self, itens: list, ids_enviados: set):
        self.por_id = {i.id: i for i in itens}
        self.livres = [i for i in itens if i.id not in ids_enviados]

    def retirar(self, dados: ItemOrdemServicoIn):
        if dados.id is not None:
            item = self.por_id.pop(dados.id, None)
            if item is None:
                raise HTTPException(status_code=404, detail=f"Item {dados.id} não pertence a esta OS")
            return item

        referencia = _referencia(dados)
        if referencia is None:
            return None
        for item in self.livres:
            if item.tipo == dados.tipo and _referencia(item) == referencia:
                self.livres.remove(item)
                self.por_id.pop(item.id, None)
                return item
        return None


def _copiar_snapshot(contexto: ContextoRequisicao, gravado: ItemOrdemServico, quantidade: Decimal) -> ItemOrdemServico:
    return ItemOrdemServico(
        tenant_id=contexto.tenant_id,
        tipo=gravado.tipo,
        produto_id=gravado.produto_id,
        servico_id=gravado.servico_id,
        descricao=gravado.descricao,
        quantidade=quantidade,
        preco_unitario=gravado.preco_unitario,
    )


def _item_avulso(db: Session, contexto: ContextoRequisicao, dados: ItemOrdemServicoIn) -> ItemOrdemServico:
    # descricao e preco vieram prontos; referencia excluida do catalogo vira NULL
    modelo = Produto if dados.tipo == TipoItemOrdem.PRODUTO else Servico
    referencia = _referencia(dados)
    if referencia is not None and not get_by_id(db, modelo, referencia, contexto.tenant_id, raise_not_found=False):
        logger.warning(f"[OS] {modelo.__name__} {referencia} fora do catálogo; item mantido só com o snapshot")
        referencia = None

    return ItemOrdemServico(
        tenant_id=contexto.tenant_id,
        tipo=dados.tipo,
        produto_id=referencia if dados.tipo == TipoItemOrdem.PRODUTO else None,
        servico_id=referencia if dados.tipo == TipoItemOrdem.SERVICO else None,
        descricao=dados.descricao,
        quantidade=dados.quantidade,
        preco_unitario=arredondar(dados.preco_unitario),
    )


def _montar_item(
    db: Session,
    contexto: ContextoRequisicao,
    dados: ItemOrdemServicoIn,
    gravados: _ItensGravados = None
) -> ItemOrdemServico:
    """
    Snapshot do item, em ordem de prioridade:
    1. item ja gravado na OS mantem descricao e preco da gravacao anterior
    2. descricao e preco enviados juntos dispensam o catalogo
    3. item novo copia o catalogo atual
    """
    gravado = gravados.retirar(dados) if gravados is not None else None
    if gravado is not None:
        item = _copiar_snapshot(contexto, gravado, dados.quantidade)
    elif dados.descricao and dados.preco_unitario is not None:
        return _item_avulso(db, contexto, dados)
    else:
        item = item_do_catalogo(db, contexto, dados.tipo, _referencia(dados), dados.quantidade)

    # Edicoes do operador sobre o snapshot
    if dados.descricao:
        item.descricao = dados.descricao
    if dados.preco_unitario is not None:
        item.preco_unitario = arredondar(dados.preco_unitario)

    return item


def salvar_ordem(
    db: Session,
    contexto: ContextoRequisicao,
    dados: OrdemServicoSave,
    ordem_id: int = None
) -> OrdemServico:
    """
    Cria (ordem_id=None) ou edita uma OS.

    Os itens gravados passam a ser exatamente os enviados: os anteriores sao
    apagados, nunca mesclados. O total e recalculado e gravado junto.
    """
    if dados.status not in STATUS_EDITAVEIS:
        raise HTTPException(
            status_code=400,
            detail="Para concluir a OS use a finalização (baixa de estoque e lançamento da receita)"
        )

    operacao = f"OS {ordem_id}" if ordem_id else "nova OS"
    with unidade_de_trabalho(db, operacao):
        if dados.cliente_id:
            validate_fk(db, Cliente, dados.cliente_id, contexto.tenant_id, "Cliente")

        if ordem_id is None:
            ordem = OrdemServico(
                tenant_id=contexto.tenant_id,
                numero=generate_sequential_number(db, Prefixes.ORDEM_SERVICO, contexto.tenant_id),
                created_by=contexto.usuario_id,
            )
            db.add(ordem)
        else:
            ordem = carregar_ordem(db, contexto, ordem_id)
            forbid_status(ordem, StatusOrdemServico.CONCLUIDO, "Edição", status_code=409)

        ordem.cliente_id = dados.cliente_id
        ordem.veiculo_placa = dados.veiculo_placa
        ordem.veiculo_marca = dados.veiculo_marca
        ordem.veiculo_modelo = dados.veiculo_modelo
        ordem.status = dados.status
        ordem.observacao = dados.observacao
        ordem.updated_by = contexto.usuario_id

        gravados = _ItensGravados(list(ordem.itens), {i.id for i in dados.itens if i.id is not None})

        # Replace-all: delete-orphan remove os itens antigos no flush
        ordem.itens = [_montar_item(db, contexto, item, gravados) for item in dados.itens]
        ordem.total = calcular_total(ordem.itens)

    db.refresh(ordem)
    logger.info(
        f"[OS] {ordem.numero} gravada (tenant {contexto.tenant_id}): "
        f"{len(ordem.itens)} item(ns), total {formatar_reais(ordem.total)}"
    )
    return ordem


def adicionar_item(
    db: Session,
    contexto: ContextoRequisicao,
    ordem_id: int,
    dados: ItemOrdemServicoIn
) -> OrdemServico:
    """Inclui um item (snapshot do catalogo) e regrava o total"""
    with unidade_de_trabalho(db, f"inclusão de item na OS {ordem_id}"):
        ordem = carregar_ordem(db, contexto, ordem_id)
        forbid_status(ordem, StatusOrdemServico.CONCLUIDO, "Edição", status_code=409)

        ordem.itens.append(_montar_item(db, contexto, dados))
        ordem.total = calcular_total(ordem.itens)
        ordem.updated_by = contexto.usuario_id

    db.refresh(ordem)
    return ordem


def remover_item(
    db: Session,
    contexto: ContextoRequisicao,
    ordem_id: int,
    posicao: int
) -> OrdemServico:
    """Remove o item pela posicao na lista (0 = primeiro) e regrava o total"""
    with unidade_de_trabalho(db, f"remoção de item da OS {ordem_id}"):
        ordem = carregar_ordem(db, contexto, ordem_id)
        forbid_status(ordem, StatusOrdemServico.CONCLUIDO, "Edição", status_code=409)

        if posicao < 0 or posicao >= len(ordem.itens):
            raise HTTPException(status_code=404, detail="Item não encontrado na OS")

        del ordem.itens[posicao]
        ordem.total = calcular_total(ordem.itens)
        ordem.updated_by = contexto.usuario_id

    db.refresh(ordem)
    return ordem


def finalizar_ordem(
    db: Session,
    contexto: ContextoRequisicao,
    ordem_id: int,
    confirmar: bool
) -> OrdemServico:
    """
    Finaliza a OS (irreversivel).

    Em uma unica transacao:
    1. status -> CONCLUIDO, total recalculado
    2. baixa de estoque de cada item do tipo PRODUTO
    3. uma RECEITA pendente com o total, ligada a OS

    Uma OS ja CONCLUIDA ou CANCELADA e recusada (409): finalizar duas vezes
    nao baixa estoque nem lanca receita em dobro.
    """
    if not confirmar:
        raise HTTPException(
            status_code=400,
            detail="Confirme a finalização: a OS será concluída, o estoque baixado e a receita lançada"
        )

    with unidade_de_trabalho(db, f"finalização da OS {ordem_id}"):
        ordem = carregar_ordem(db, contexto, ordem_id)
        bloqueados = [StatusOrdemServico.CONCLUIDO, StatusOrdemServico.CANCELADO]
        forbid_status(ordem, bloqueados, "Finalização", status_code=409)

        total = calcular_total(ordem.itens)

        # Transicao condicional: de duas finalizacoes simultaneas so uma casa
        linhas = db.query(OrdemServico).filter(
            OrdemServico.id == ordem.id,
            OrdemServico.tenant_id == contexto.tenant_id,
            OrdemServico.status.notin_(bloqueados)
        ).update(
            {
                OrdemServico.status: StatusOrdemServico.CONCLUIDO,
                OrdemServico.total: total,
                OrdemServico.data_finalizacao: agora(),
                OrdemServico.updated_by: contexto.usuario_id,
            },
            synchronize_session=False
        )
        if not linhas:
            raise HTTPException(status_code=409, detail="OS já foi finalizada por outro usuário")

        for item in ordem.itens:
            if item.tipo == TipoItemOrdem.PRODUTO and item.produto_id:
                baixar_estoque(db, contexto, item.produto_id, item.quantidade)

        db.add(Transacao(
            tenant_id=contexto.tenant_id,
            descricao=f"Receita OS {ordem.numero} - Placa {ordem.veiculo_placa}",
            tipo=TipoTransacao.RECEITA,
            categoria=CATEGORIA_RECEITA_OS,
            valor=total,
            status=StatusTransacao.PENDENTE,
            data_vencimento=date.today(),
            ordem_servico_id=ordem.id,
            created_by=contexto.usuario_id,
        ))

    db.refresh(ordem)
    logger.info(
        f"[OS] {ordem.numero} finalizada (tenant {contexto.tenant_id}): receita de {formatar_reais(ordem.total)}"
    )
    return ordem
