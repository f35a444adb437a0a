from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal('0.01')
ZERO = Decimal('0.00')


def to_money(value) -> Decimal:
    """Coerce `value` to a Decimal rounded half-up to two places."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        try:
            value = Decimal(str(value))
        except InvalidOperation:
            raise ValueError(f'Not a monetary amount: {value!r}')
    return value.quantize(CENT, rounding=ROUND_HALF_UP)
