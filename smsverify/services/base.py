from typing import Optional

from smsverify.core.context import SendContext
from smsverify.schemas.sms import SendOutcome


class VerificationSender:
    """Sends one verification code to one destination."""

    def send_verification_code(
        self,
        destination_number: str,
        context: Optional[SendContext] = None
    ) -> SendOutcome:
        raise NotImplementedError
