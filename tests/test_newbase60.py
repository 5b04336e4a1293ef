import datetime as dt

from gum.services.newbase60 import (
    date_to_epoch_days,
    decode_to_int,
    encode_int,
    epoch_days_to_date,
)


def test_encode_int():
    assert encode_int(0) == "0"
    assert encode_int(100) == "1f"
    assert encode_int(59) == "z"
    assert encode_int(60) == "10"


def test_decode_to_int():
    assert decode_to_int("1f") == 100
    # look-alike characters
    assert decode_to_int("l") == 1
    assert decode_to_int("O") == 0


def test_epoch_days():
    cases = [
        ("000", dt.date(1970, 1, 1)),
        ("VeB", dt.date(2262, 4, 11)),
        ("4Wn", dt.date(2014, 6, 26)),
    ]
    for s, d in cases:
        assert epoch_days_to_date(s) == d
        assert date_to_epoch_days(d) == s
