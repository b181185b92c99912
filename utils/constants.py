"""
utils/constants.py

Purpose: Centralized static content

- SNS message attribute names and classification values
- Default message template
- Provider error codes that are not worth retrying

(Prevents hardcoding across the codebase)
"""

# ============================================================
# MESSAGE CONTENT
# ============================================================

DEFAULT_MESSAGE_TEMPLATE = "Your verification code: {code}"

DEFAULT_CODE_LENGTH = 6

SUCCESS_MESSAGE = "Verification code sent successfully: {code}"

# ============================================================
# SNS MESSAGE ATTRIBUTES
# ============================================================

SMS_TYPE_ATTRIBUTE = "AWS.SNS.SMS.SMSType"
SENDER_ID_ATTRIBUTE = "AWS.SNS.SMS.SenderID"

SMS_TYPE_TRANSACTIONAL = "Transactional"
SMS_TYPE_PROMOTIONAL = "Promotional"

# ============================================================
# PROVIDER ERRORS
# ============================================================

# SNS error codes that will fail the same way on every attempt
PERMANENT_ERROR_CODES = frozenset({
    "InvalidParameter",
    "InvalidParameterValue",
    "AuthorizationError",
    "NotFound",
    "EndpointDisabled",
    "InvalidClientTokenId",
    "SignatureDoesNotMatch",
    "AccessDenied",
    "AccessDeniedException",
    "ValidationError",
})
