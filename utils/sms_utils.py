"""
utils/sms_utils.py

Purpose: SMS message builders

- Formats the verification message body
- Builds SNS Publish parameters and message attributes
"""

from typing import Any, Dict, Optional

from utils.constants import (
    DEFAULT_MESSAGE_TEMPLATE,
    SENDER_ID_ATTRIBUTE,
    SMS_TYPE_ATTRIBUTE,
)


def build_verification_message(code: str, template: str = DEFAULT_MESSAGE_TEMPLATE) -> str:
    """
    Builds the SMS body embedding the verification code.

    Args:
        code: Generated verification code
        template: Message template containing a {code} placeholder

    Returns:
        Message body
    """
    return template.replace("{code}", code)


def _string_attribute(value: str) -> Dict[str, str]:
    return {"DataType": "String", "StringValue": value}


def build_message_attributes(sms_type: str, sender_id: Optional[str] = None) -> Dict[str, Dict[str, str]]:
    """
    Builds SNS SMS message attributes.

    The classification is always set; the sender ID only when configured.
    """
    attributes = {SMS_TYPE_ATTRIBUTE: _string_attribute(sms_type)}

    if sender_id:
        attributes[SENDER_ID_ATTRIBUTE] = _string_attribute(sender_id)

    return attributes


def build_publish_params(
    destination: str,
    message: str,
    sms_type: str,
    sender_id: Optional[str] = None
) -> Dict[str, Any]:
    """
    Builds keyword arguments for `sns.publish` to a phone number.
    """
    return {
        "PhoneNumber": destination,
        "Message": message,
        "MessageAttributes": build_message_attributes(sms_type, sender_id),
    }
