from __future__ import annotations

import re
import time

from regdesk.app.record_models import Option


_NON_ALPHA_PATTERN = re.compile(r"[^A-Za-z]")
_PART_WIDTH = 2
_SEQUENCE_DIGITS = 5


def _initials(option: Option | None, placeholder: str) -> str:
    source = ""
    if option is not None:
        source = option.label or option.value
    if not source:
        source = placeholder
    letters = _NON_ALPHA_PATTERN.sub("", source)
    return letters[:_PART_WIDTH].upper().ljust(_PART_WIDTH, "X")


def generate_reg_id(
    region: Option | None,
    gs_division: Option | None,
    *,
    now_ms: int | None = None,
) -> str:
    """Build a short ``RG-GS-12345`` tag from region and GS division initials.

    The trailing sequence is the last five digits of the millisecond clock, so
    two records created in the same instant can share a tag. RegID is a
    display label only; NIC is the unique key.
    """
    stamp = int(time.time() * 1000) if now_ms is None else int(now_ms)
    sequence = str(abs(stamp))[-_SEQUENCE_DIGITS:].rjust(_SEQUENCE_DIGITS, "0")
    return f"{_initials(region, 'RG')}-{_initials(gs_division, 'GS')}-{sequence}"
