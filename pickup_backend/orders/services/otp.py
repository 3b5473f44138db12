# orders/services/otp.py

"""
PICKUP OTP

- Numeric, OTP_LENGTH digits (default 6), drawn from `secrets`.
- Compared in constant time.
- Never logged.
"""

from __future__ import annotations

import secrets

from django.conf import settings


def otp_length() -> int:
    return int(getattr(settings, "OTP_LENGTH", 6) or 6)


def generate_otp() -> str:
    length = otp_length()
    return "".join(str(secrets.randbelow(10)) for _ in range(length))


def is_valid_otp_format(value) -> bool:
    if not isinstance(value, str):
        return False
    return len(value) == otp_length() and value.isascii() and value.isdigit()


def otp_matches(*, expected: str, submitted: str) -> bool:
    if not expected or not submitted:
        return False
    return secrets.compare_digest(expected.encode(), submitted.encode())
