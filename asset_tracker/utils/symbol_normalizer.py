import re

_SYMBOL_PATTERN = re.compile(r"^[A-Z0-9.=_-]{1,20}$")
_FOREX_PAIR_PATTERN = re.compile(r"^([A-Z]{3})/?([A-Z]{3})(=X)?$")


def normalize_symbol(symbol: str) -> str:
    cleaned = symbol.strip().upper()
    if not cleaned or not _SYMBOL_PATTERN.match(cleaned):
        raise ValueError(f"Invalid symbol '{symbol}'")
    return cleaned


def parse_symbol_list(raw: str) -> list[str]:
    """Split a comma separated symbol list, ignoring blanks."""
    return [normalize_symbol(part) for part in raw.split(",") if part.strip()]


def crypto_base(symbol: str) -> str:
    upper = symbol.strip().upper()
    for suffix in ("-USD", "USDT"):
        if upper.endswith(suffix) and len(upper) > len(suffix):
            return upper[: -len(suffix)].rstrip("-")
    return upper


def to_binance_symbol(symbol: str) -> str:
    return f"{crypto_base(symbol)}USDT"


def to_bitget_symbol(symbol: str) -> str:
    return f"{crypto_base(symbol)}USDT_SPBL"


def split_forex_pair(symbol: str) -> tuple[str, str]:
    match = _FOREX_PAIR_PATTERN.match(symbol.strip().upper())
    if not match:
        raise ValueError(f"Invalid forex pair '{symbol}'")
    return match.group(1), match.group(2)
