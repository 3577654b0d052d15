import re
from typing import Optional

from listing_gateway.schemas.listing import ExchangeRate

AMOUNT_PATTERN = re.compile(r"-?\d*\.?\d+")


def parse_usd_amount(price: str) -> Optional[float]:
    """First decimal amount in an upstream price string, e.g. ``"$1,200.50"`` -> 1200.5."""
    if not price:
        return None
    match = AMOUNT_PATTERN.search(price.replace("$", "").replace(",", ""))
    if not match:
        return None
    return float(match.group(0))


def format_price(price: str, rate: ExchangeRate, currency: str) -> str:
    code = currency.upper()
    if code not in {rate.base.upper(), rate.target.upper()}:
        raise ValueError(f"Unsupported currency {currency!r}")

    amount = parse_usd_amount(price)
    if amount is None:
        return price
    if code == rate.base.upper():
        return f"${amount:.2f}"
    return f"{rate.target.upper()} {amount * rate.rate:.0f}"
