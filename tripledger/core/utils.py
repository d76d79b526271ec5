from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP, getcontext

getcontext().prec = 28
CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

# Anything within a cent of zero (or of its target) counts as settled
TOLERANCE = Decimal("0.01")

def qround(d: Decimal) -> Decimal:
    return d.quantize(CENTS, rounding=ROUND_HALF_UP)

def qfloor(d: Decimal) -> Decimal:
    return d.quantize(CENTS, rounding=ROUND_DOWN)

def to_money(value) -> Decimal:
    if isinstance(value, Decimal):
        return qround(value)
    return qround(Decimal(str(value)))

def within_tolerance(a: Decimal, b: Decimal = ZERO) -> bool:
    return abs(a - b) <= TOLERANCE

def fmt_money(d: Decimal) -> str:
    return str(qround(d))
