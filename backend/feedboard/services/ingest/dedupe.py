from __future__ import annotations

BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _utf16_units(text: str):
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def string_hash(key: str) -> int:
    """
    Rolling ``h * 31 + c`` hash over UTF-16 code units, kept to a signed
    32-bit integer at every step.
    """
    h = 0
    for unit in _utf16_units(key or ""):
        h = _int32((h << 5) - h + unit)
    return h


def make_id(namespace: str, key: str) -> str:
    """
    Stable item id such as ``news-1x2y3z``.

    Equal keys always give equal ids; the namespace keeps ids from different
    sources apart even when the key (usually the item URL) is the same.
    """
    return f"{namespace}-{_base36(abs(string_hash(key)))}"
