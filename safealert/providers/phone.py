"""Phone number canonicalisation for channel addressing."""

from __future__ import annotations

import re

_NON_DIALABLE = re.compile(r"[^0-9+]")

DEFAULT_CALLING_CODE = "91"
DEFAULT_NATIONAL_LENGTH = 10


def normalize_phone(
    raw: str,
    calling_code: str = DEFAULT_CALLING_CODE,
    national_length: int = DEFAULT_NATIONAL_LENGTH,
) -> str:
    """Canonicalise *raw* towards E.164 for the home country.

    Keeps digits and a leading ``+``. A leading ``00`` becomes ``+``; a bare
    national number gets ``+{calling_code}``; a number already carrying the
    calling code without ``+`` gets the ``+``. Anything else is returned
    as cleaned, so an unusable number fails later at the vendor rather than
    here. Idempotent and never raises.
    """
    cleaned = _NON_DIALABLE.sub("", raw or "")
    has_plus = cleaned.startswith("+")
    digits = cleaned.replace("+", "")

    if has_plus:
        return f"+{digits}"

    if digits.startswith("00"):
        return f"+{digits[2:]}"

    if len(digits) == len(calling_code) + national_length and digits.startswith(calling_code):
        return f"+{digits}"

    if len(digits) == national_length:
        return f"+{calling_code}{digits}"

    return digits
