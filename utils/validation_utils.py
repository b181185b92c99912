"""
utils/validation_utils.py

Purpose: Input and provider-error validation

- E.164 phone number normalization and validation
- Verification code format checks
- Classification of provider errors as permanent or transient
"""

import re
from typing import Optional

from botocore.exceptions import ClientError, ParamValidationError

from utils.constants import PERMANENT_ERROR_CODES

E164_PATTERN = re.compile(r"\+[1-9][0-9]{6,14}")


def normalize_phone_number(phone: str) -> str:
    """
    Removes common separators from a phone number.

    Args:
        phone: Phone number as typed, e.g. "+1 (555) 123-4567"

    Returns:
        Phone number without spaces, dashes, dots or parentheses
    """
    if not phone:
        return ""
    return re.sub(r"[\s\-\.\(\)]", "", phone.strip())


def validate_e164_number(phone: str) -> bool:
    """
    Validates E.164 format: "+", country code, subscriber number,
    at most 15 digits in total.

    Args:
        phone: Phone number string

    Returns:
        True if valid E.164 number
    """
    if not phone:
        return False
    return E164_PATTERN.fullmatch(phone) is not None


def validate_code_format(code: str, length: Optional[int] = None) -> bool:
    """
    Validates a verification code (digits only, optional exact length).
    """
    if not code or not (code.isascii() and code.isdigit()):
        return False
    if length is not None and len(code) != length:
        return False
    return True


def get_error_code(error: BaseException) -> Optional[str]:
    """
    Extracts the provider error code from a botocore ClientError.
    """
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None


def is_permanent_error(error: BaseException) -> bool:
    """
    Returns True if retrying `error` cannot succeed.

    Request validation failures and SNS error codes such as
    InvalidParameter are permanent. Throttling, server errors and
    connection problems are transient.
    """
    if isinstance(error, ParamValidationError):
        return True
    if isinstance(error, ClientError):
        return get_error_code(error) in PERMANENT_ERROR_CODES
    return False
