def format_currency(amount: float, symbol: str = "R$") -> str:
    """Format a float as currency string, e.g. 'R$ 1,234.56'."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol} {abs(amount):,.2f}"


def format_signed(amount: float, symbol: str = "R$") -> str:
    """Format with +/- sign."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{symbol} {abs(amount):,.2f}"


def parse_amount(text: str) -> float | None:
    """Parse user input such as '1.234,56', '1234.56' or 'R$ 50'. None if invalid."""
    raw = (text or "").replace("R$", "").replace("$", "").strip().replace(" ", "")
    if not raw:
        return None
    if "," in raw:
        # Brazilian style: '.' groups thousands, ',' marks decimals
        raw = raw.replace(".", "").replace(",", ".")
    try:
        return float(raw)
    except ValueError:
        return None
