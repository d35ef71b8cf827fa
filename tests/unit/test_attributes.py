from __future__ import annotations

from kofparse.parsing.attributes import parse_attrs, parse_kv_pairs


def test_parse_kv_pairs_handles_bare_and_quoted_values():
    pairs = parse_kv_pairs("layer=VEG name=\"Kant veg\" owner='NVE'")

    assert pairs == {"layer": "VEG", "name": "Kant veg", "owner": "NVE"}


def test_parse_kv_pairs_unescapes_quotes_and_backslashes():
    pairs = parse_kv_pairs('label="say \\"hei\\"" path="C:\\\\data" note=\'it\\\'s\'')

    assert pairs["label"] == 'say "hei"'
    assert pairs["path"] == "C:\\data"
    assert pairs["note"] == "it's"


def test_parse_attrs_strips_leading_record_code():
    assert parse_attrs("11 fcode=1001 name=Gjerde") == {"fcode": "1001", "name": "Gjerde"}
    assert parse_attrs("  30 layer=BYGG") == {"layer": "BYGG"}


def test_parse_attrs_without_pairs_keeps_raw_tokens():
    assert parse_attrs("12 Prosjekt Nord 2024") == {"_raw": ["Prosjekt", "Nord", "2024"]}


def test_parse_attrs_does_not_strip_longer_numbers():
    assert parse_attrs("1001 layer=VEG") == {"layer": "VEG"}
    assert parse_attrs("1001 extra") == {"_raw": ["1001", "extra"]}
