from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Literal, Optional

from smsverify.core.exceptions import SendError
from utils.constants import DEFAULT_MESSAGE_TEMPLATE, SMS_TYPE_TRANSACTIONAL


class AuthCredentials(BaseModel):
    """
    Provider authentication, supplied once at client construction.
    """
    model_config = ConfigDict(frozen=True)

    access_key_id: str
    secret_access_key: str = Field(repr=False)
    region: str


class MessagingConfig(BaseModel):
    """
    Messaging policy applied to every send.
    """
    model_config = ConfigDict(frozen=True)

    sender_id: Optional[str] = None
    sms_type: Literal["Transactional", "Promotional"] = SMS_TYPE_TRANSACTIONAL
    max_retries: int = Field(default=3, ge=0)
    retry_delay: float = Field(default=2.0, ge=0)
    code_length: int = Field(default=6, ge=4, le=12)
    message_template: str = DEFAULT_MESSAGE_TEMPLATE
    retry_permanent_errors: bool = True

    @field_validator("message_template")
    @classmethod
    def template_embeds_code(cls, v: str) -> str:
        if "{code}" not in v:
            raise ValueError("message_template must contain a {code} placeholder")
        return v


class VerificationRequest(BaseModel):
    """
    A single verification message, built per call.
    """
    model_config = ConfigDict(frozen=True)

    destination_number: str
    generated_code: str
    message_body: str


class DispatchReceipt(BaseModel):
    """
    Provider acknowledgement for a dispatched message.
    """
    model_config = ConfigDict(frozen=True)

    message_id: str
    attempts: int


class SendOutcome(BaseModel):
    """
    Result of a verification send.

    On success `code` and `message_id` are set; on failure `error` carries
    the typed send error (destination, code, last cause).
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    destination_number: str
    code: Optional[str] = None
    message_id: Optional[str] = None
    attempts: int = 0
    error: Optional[SendError] = None

    @property
    def success(self) -> bool:
        return self.error is None
