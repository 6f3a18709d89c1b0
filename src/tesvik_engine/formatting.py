"""Turkish number formatting for messages and reports."""

from __future__ import annotations


def format_try(amount: float, decimals: int = 0) -> str:
    """1234567.5 → '1.234.568 TL' (dot thousands, comma decimals)."""
    text = f"{amount:,.{decimals}f}"
    text = text.replace(",", "\0").replace(".", ",").replace("\0", ".")
    return f"{text} TL"


def format_pct(ratio: float) -> str:
    """0.25 → '%25'."""
    pct = ratio * 100
    if abs(pct - round(pct)) < 1e-9:
        return f"%{pct:.0f}"
    return f"%{pct:.1f}".replace(".", ",")
