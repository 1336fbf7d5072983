"""Display formatting for tenge amounts."""
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Union

NBSP = "\u00a0"


def whole_units(value: Union[int, float, Decimal]) -> int:
    """Round to whole tenge, half away from zero, at any magnitude."""
    value = Decimal(str(value))
    with localcontext() as ctx:
        # quantize fails once the integer part outgrows the context precision
        ctx.prec = max(ctx.prec, value.adjusted() + 2)
        return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def format_tenge(value: Union[int, float, Decimal]) -> str:
    """Format as whole tenge with grouped thousands, e.g. '15 000 ₸'."""
    return f"{whole_units(value):,}".replace(",", NBSP) + " ₸"
