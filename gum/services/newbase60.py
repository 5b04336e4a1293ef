"""NewBase60 integer encoding and epoch-day helpers.

NewBase60 is the sexagesimal alphabet used for compact personal short links,
e.g. WordPress post 100 becomes ``/b/1f``. Epoch days count the days since
1970-01-01 and are encoded as at least three NewBase60 characters.
"""
from __future__ import annotations

import datetime as _dt

ALPHABET = "0123456789ABCDEFGHJKLMNPQRSTUVWXYZ_abcdefghijkmnopqrstuvwxyz"

# Characters that are easily confused with others decode to the digit they
# resemble.
_ALIASES = {"I": 1, "l": 1, "O": 0}
_VALUES = {ch: i for i, ch in enumerate(ALPHABET)}
_VALUES.update(_ALIASES)

EPOCH = _dt.date(1970, 1, 1)


def encode_int(n: int) -> str:
    if n < 0:
        raise ValueError("cannot encode negative numbers")
    if n == 0:
        return "0"
    digits = []
    while n > 0:
        n, rem = divmod(n, 60)
        digits.append(ALPHABET[rem])
    return "".join(reversed(digits))


def decode_to_int(s: str) -> int:
    n = 0
    for ch in s:
        n = n * 60 + _VALUES.get(ch, 0)
    return n


def epoch_days_to_date(s: str) -> _dt.date:
    return EPOCH + _dt.timedelta(days=decode_to_int(s))


def date_to_epoch_days(d: _dt.date) -> str:
    if isinstance(d, _dt.datetime):
        if d.tzinfo is not None:
            d = d.astimezone(_dt.timezone.utc)
        d = d.date()
    return encode_int((d - EPOCH).days).rjust(3, "0")
