"""
Aritmetica monetaria em ponto fixo

Todo valor em reais trafega como Decimal e e arredondado para centavos
(ROUND_HALF_UP) apenas nas bordas: ao calcular totais, ao aplicar margem e ao
gravar no banco. Nunca usar float para dinheiro.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

CENTAVO = Decimal("0.01")
ZERO = Decimal("0.00")


def para_decimal(valor: Any) -> Decimal:
    """Converte int/str/Decimal (ou float vindo de JSON) para Decimal sem perder digitos"""
    if valor is None:
        return Decimal(0)
    if isinstance(valor, Decimal):
        return valor
    if isinstance(valor, float):
        # str() evita levar a representacao binaria do float para o Decimal
        return Decimal(str(valor))
    try:
        return Decimal(str(valor).strip())
    except InvalidOperation:
        raise ValueError(f"Valor numérico inválido: {valor!r}")


def arredondar(valor: Any) -> Decimal:
    """Arredonda para centavos"""
    return para_decimal(valor).quantize(CENTAVO, rounding=ROUND_HALF_UP)


def aplicar_margem(custo: Any, margem_percentual: Any) -> Decimal:
    """
    Preco de venda = custo * (1 + margem/100), em centavos

    >>> aplicar_margem("10.00", 30)
    Decimal('13.00')
    """
    fator = Decimal(1) + para_decimal(margem_percentual) / Decimal(100)
    return arredondar(para_decimal(custo) * fator)


def formatar_reais(valor: Any) -> str:
    """Formato de exibicao: R$ 1.234,56"""
    texto = f"{arredondar(valor):,.2f}"
    return "R$ " + texto.replace(",", "_").replace(".", ",").replace("_", ".")
