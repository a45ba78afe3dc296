from __future__ import annotations

import secrets
from typing import Any

from ..core.constants import DEFAULT_OTP_LENGTH
from ..core.exceptions import ValidationError


def generate_otp(length: int = DEFAULT_OTP_LENGTH) -> str:
    """Fixed-length numeric code (digits 0-9 only, leading zeros allowed)."""
    if length <= 0:
        raise ValidationError("Độ dài OTP phải lớn hơn 0")
    return "".join(secrets.choice("0123456789") for _ in range(length))


def otp_matches(expected: str | None, submitted: Any) -> bool:
    """Form posts give a str, JSON bodies may give a number; both are compared as text."""
    if not expected or submitted is None or isinstance(submitted, bool):
        return False
    text = str(submitted).strip()
    if not text:
        return False
    return secrets.compare_digest(expected.encode(), text.encode())
