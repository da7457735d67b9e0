"""
Attribute lookup over the loosely-typed dicts produced by the m3u8
tokenizer and the MPD object model.
"""
from typing import Any, Mapping, Optional


def normalize_key(name: str) -> str:
    """``AVERAGE-BANDWIDTH``, ``average_bandwidth`` and ``averageBandwidth`` collapse to one key."""
    return name.replace("-", "").replace("_", "").lower()


def get_attr(attrs: Optional[Mapping[str, Any]], *names: str, default: Any = None) -> Any:
    """
    Return the first present, non-empty value among ``names``.

    Keys are matched case-insensitively and ignoring ``-``/``_``. Precedence is
    the argument order, so ``get_attr(info, "BANDWIDTH", "AVERAGE-BANDWIDTH")``
    only falls back to the average when the peak bandwidth is missing.
    """
    if not attrs:
        return default

    index = {normalize_key(k): v for k, v in attrs.items()}
    for name in names:
        value = index.get(normalize_key(name))
        if value is not None and value != "":
            return value
    return default


def to_int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default


def to_bitrate(value: Any) -> int:
    """Bits per second; negative or unparseable values count as missing (0)."""
    bitrate = to_int(value)
    return bitrate if bitrate > 0 else 0


def to_float(value: Any) -> Optional[float]:
    """Parse ``29.97`` or a ``30000/1001`` ratio. ``None`` when unparseable."""
    if value is None or value == "":
        return None
    if isinstance(value, str) and "/" in value:
        num, _, den = value.partition("/")
        try:
            return float(num) / float(den)
        except (ValueError, ZeroDivisionError):
            return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def split_codecs(value: Any) -> list[str]:
    if not value:
        return []
    return [c.strip() for c in str(value).strip('"').split(",") if c.strip()]
