import re

from regdesk.app.record_models import Option
from regdesk.app.reg_id import generate_reg_id


REG_ID_PATTERN = re.compile(r"^[A-Z]{2}-[A-Z]{2}-\d{5}$")


def test_reg_id_uses_label_initials_and_clock_tail():
    region = Option(value="western", label="Western")
    gs_division = Option(value="GS-003", label="Bambalapitiya")
    assert generate_reg_id(region, gs_division, now_ms=1700000012345) == "WE-BA-12345"


def test_reg_id_falls_back_to_placeholders():
    assert generate_reg_id(None, None, now_ms=7) == "RG-GS-00007"


def test_reg_id_pads_short_or_non_alpha_parts():
    region = Option(value="x", label="1 a")
    gs_division = Option(value="99", label="")
    assert generate_reg_id(region, gs_division, now_ms=42) == "AX-XX-00042"


def test_reg_id_uses_value_when_label_missing():
    region = Option(value="uva", label="")
    assert generate_reg_id(region, None, now_ms=123456789).startswith("UV-GS-")


def test_reg_id_matches_format_with_real_clock():
    region = Option(value="central", label="Central")
    assert REG_ID_PATTERN.match(generate_reg_id(region, None))
