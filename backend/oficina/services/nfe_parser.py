"""
Leitura do XML da NF-e (modelo 55) para pre-visualizacao da entrada de estoque

Nao grava nada: devolve fornecedor, chave, total declarado e os itens com
preco de venda sugerido pela margem. O operador revisa e confirma em
importacao_service.confirmar_importacao.
"""
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Union

from oficina.config import settings
from oficina.core.dinheiro import aplicar_margem, arredondar, para_decimal
from oficina.schemas.fornecedor import normalizar_cnpj

logger = logging.getLogger(__name__)


class NFeParseError(ValueError):
    """XML ilegivel ou sem algum bloco obrigatorio da NF-e"""


@dataclass
class ItemNFe:
    sku: str
    nome: str
    preco_custo: Decimal
    preco_venda: Decimal
    quantidade: Decimal
    unidade: str = "UN"


@dataclass
class PreviewNFe:
    fornecedor_nome: str
    fornecedor_cnpj: str
    chave: str
    valor_total: Decimal
    margem_percentual: Decimal
    itens: List[ItemNFe] = field(default_factory=list)

    @property
    def valor_itens(self) -> Decimal:
        return arredondar(sum((i.preco_custo * i.quantidade for i in self.itens), Decimal(0)))


def _sem_namespace(raiz: ET.Element) -> ET.Element:
    # {http://www.portalfiscal.inf.br/nfe}infNFe -> infNFe
    for elem in raiz.iter():
        if isinstance(elem.tag, str) and "}" in elem.tag:
            elem.tag = elem.tag.split("}", 1)[1]
    return raiz


def _filho(pai: ET.Element, caminho: str) -> ET.Element:
    elem = pai.find(caminho)
    if elem is None:
        raise NFeParseError(f"Bloco <{caminho}> ausente no XML da NF-e")
    return elem


def _texto(pai: ET.Element, caminho: str, obrigatorio: bool = True) -> Optional[str]:
    elem = pai.find(caminho)
    texto = (elem.text or "").strip() if elem is not None else ""
    if not texto:
        if obrigatorio:
            raise NFeParseError(f"Campo <{caminho}> ausente ou vazio no XML da NF-e")
        return None
    return texto


def _numero(pai: ET.Element, caminho: str) -> Decimal:
    texto = _texto(pai, caminho)
    try:
        valor = para_decimal(texto)
    except ValueError:
        raise NFeParseError(f"Campo <{caminho}> com valor numérico inválido: {texto!r}")
    if not valor.is_finite():
        raise NFeParseError(f"Campo <{caminho}> com valor numérico inválido: {texto!r}")
    return valor


def _localizar_inf_nfe(raiz: ET.Element) -> ET.Element:
    if raiz.tag == "nfeProc":
        nfe = _filho(raiz, "NFe")
    elif raiz.tag == "NFe":
        nfe = raiz
    else:
        raise NFeParseError(f"Raiz <{raiz.tag}> não é uma NF-e (esperado nfeProc ou NFe)")
    return _filho(nfe, "infNFe")


def parsear_nfe(
    xml: Union[str, bytes],
    margem_percentual: Optional[Decimal] = None
) -> PreviewNFe:
    """
    Extrai os dados de importacao de uma NF-e.

    Args:
        xml: conteudo do arquivo (str ou bytes)
        margem_percentual: margem sobre o custo para o preco de venda;
            padrao MARGEM_PADRAO_PERCENTUAL

    Raises:
        NFeParseError: qualquer bloco faltando ou numero ilegivel; nunca
            devolve uma leitura parcial
    """
    if margem_percentual is None:
        margem_percentual = settings.MARGEM_PADRAO_PERCENTUAL
    margem_percentual = para_decimal(margem_percentual)

    if isinstance(xml, str):
        # ElementTree recusa str com declaracao de encoding
        xml = xml.encode("utf-8")

    try:
        raiz = ET.fromstring(xml)
    except ET.ParseError as e:
        raise NFeParseError(f"XML inválido: {e}")

    inf_nfe = _localizar_inf_nfe(_sem_namespace(raiz))

    chave = (inf_nfe.get("Id") or "").strip()
    if not chave:
        raise NFeParseError("Atributo Id (chave de acesso) ausente em <infNFe>")

    emit = _filho(inf_nfe, "emit")
    fornecedor_nome = _texto(emit, "xNome")
    fornecedor_cnpj = normalizar_cnpj(_texto(emit, "CNPJ"))
    if len(fornecedor_cnpj) != 14:
        raise NFeParseError(f"CNPJ do emitente inválido: {fornecedor_cnpj!r}")

    dets = inf_nfe.findall("det")
    if not dets:
        raise NFeParseError("NF-e sem itens (<det>)")

    itens = []
    for det in dets:
        prod = _filho(det, "prod")
        quantidade = _numero(prod, "qCom")
        if quantidade <= 0:
            raise NFeParseError(f"Quantidade inválida no item {det.get('nItem') or len(itens) + 1}: {quantidade}")

        # vUnCom tem ate 10 casas; so o preco de venda vai para centavos
        custo = _numero(prod, "vUnCom")
        itens.append(ItemNFe(
            sku=_texto(prod, "cProd"),
            nome=_texto(prod, "xProd"),
            preco_custo=custo,
            preco_venda=aplicar_margem(custo, margem_percentual),
            quantidade=quantidade,
            unidade=_texto(prod, "uCom", obrigatorio=False) or "UN",
        ))

    valor_total = arredondar(_numero(_filho(inf_nfe, "total/ICMSTot"), "vNF"))

    preview = PreviewNFe(
        fornecedor_nome=fornecedor_nome,
        fornecedor_cnpj=fornecedor_cnpj,
        chave=chave,
        valor_total=valor_total,
        margem_percentual=margem_percentual,
        itens=itens,
    )
    logger.info(f"[IMPORTACAO] NF-e {chave} lida: {len(itens)} item(ns) de {fornecedor_nome}")
    return preview
