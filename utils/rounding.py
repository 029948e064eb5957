# utils/rounding.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Union

Number = Union[int, float, Decimal]


def to_decimal(value: Number) -> Decimal:
    # str() evita arrastrar el error binario del float (0.1 → 0.1000000000000000055...)
    return value if isinstance(value, Decimal) else Decimal(str(value))


def round_half_up(value: Number, places: int = 0) -> Decimal:
    """
    Redondeo "escolar": .5 sube (10.5 → 11, 14.195 → 14.20).
    round() de Python redondea al par, por eso no se usa aquí.
    """
    return to_decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def mean(values: Iterable[Number]) -> Optional[Decimal]:
    """Promedio exacto; None si no hay valores (no es lo mismo que 0)."""
    items = [to_decimal(v) for v in values]
    if not items:
        return None
    return sum(items, Decimal(0)) / Decimal(len(items))
