"""
Monetary precision helpers.

Every persisted money component (line totals, discount, tax, tip, total) is
quantized to the currency's minor unit with ROUND_HALF_UP, the rounding a
guest checking the receipt by hand would use (2.925 -> 2.93). Totals are sums
of already-quantized components, so displayed amounts always add up.

Key Principles:
1. NEVER use float for money
2. Quantize each component before it is stored or summed
"""

from decimal import ROUND_HALF_UP, Decimal, getcontext
from typing import Union

# Set high precision for intermediate calculations
getcontext().prec = 28

ZERO = Decimal("0.00")

# Currency minor unit exponents (how many decimal places)
CURRENCY_EXPONENT = {
    "USD": 2,
    "EUR": 2,
    "GBP": 2,
    "CAD": 2,
    "AUD": 2,
    # Zero-decimal currencies
    "JPY": 0,
    "KRW": 0,
    # 3-decimal currencies
    "KWD": 3,
    "BHD": 3,
}


def currency_exponent(currency: str) -> int:
    """
    Get the number of decimal places for a currency.

    Examples:
        >>> currency_exponent("USD")
        2
        >>> currency_exponent("JPY")
        0
        >>> currency_exponent("unknown")
        2
    """
    return CURRENCY_EXPONENT.get((currency or "USD").upper(), 2)


def quantize_decimal(currency: str) -> Decimal:
    """
    Get the quantization step for a currency.

    Examples:
        >>> quantize_decimal("USD")
        Decimal('0.01')
        >>> quantize_decimal("JPY")
        Decimal('1')
    """
    exponent = currency_exponent(currency)
    return Decimal(1).scaleb(-exponent)


def to_decimal(amount: Union[Decimal, int, str, None]) -> Decimal:
    """Coerce a stored or submitted amount to Decimal; floats go through str()."""
    if amount is None:
        return ZERO
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, float):
        return Decimal(str(amount))
    return Decimal(amount)


def quantize(currency: str, amount: Union[Decimal, int, str]) -> Decimal:
    """
    Round an amount to the currency's minor unit, half up.

    Examples:
        >>> quantize("USD", Decimal("2.925"))
        Decimal('2.93')
        >>> quantize("USD", Decimal("2.924"))
        Decimal('2.92')
        >>> quantize("JPY", Decimal("100.5"))
        Decimal('101')
    """
    return to_decimal(amount).quantize(quantize_decimal(currency), rounding=ROUND_HALF_UP)

