"""
utils/otp_utils.py

Purpose: Verification code generation

- Default code generator (cryptographically random digits)
- Pluggable: any callable taking a length and returning a digit string
"""

import secrets
from typing import Callable

from utils.constants import DEFAULT_CODE_LENGTH

CodeGenerator = Callable[[int], str]


def generate_numeric_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    """
    Generates a fixed-length numeric verification code.

    Leading zeros are kept, so the result is always `length` characters.

    Args:
        length: Number of digits

    Returns:
        Digit string, e.g. "048213"
    """
    if length < 1:
        raise ValueError("Code length must be positive")
    return "".join(secrets.choice("0123456789") for _ in range(length))

