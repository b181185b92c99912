"""
smsverify/services/sns_service.py

Purpose: Verification SMS delivery via AWS SNS

- Validates credentials once at construction (STS GetCallerIdentity)
- Generates a verification code and builds the message body
- Publishes with bounded linear retry (fixed delay, no backoff growth)
- Honours cancellation/deadline before each attempt and each sleep
"""

import time
from typing import Any, Callable, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from smsverify.core.context import SendContext
from smsverify.core.exceptions import AuthError, ConfigError, SendError, SendExhaustedError, SendRejectedError, ValidationError
from smsverify.core.logging import LogContext, get_logger
from smsverify.schemas.sms import (
    AuthCredentials,
    DispatchReceipt,
    MessagingConfig,
    SendOutcome,
    VerificationRequest,
)
from smsverify.services.base import VerificationSender
from utils.otp_utils import CodeGenerator, generate_numeric_code
from utils.sms_utils import build_publish_params, build_verification_message
from utils.validation_utils import (
    get_error_code,
    is_permanent_error,
    validate_code_format,
    validate_e164_number,
)

logger = get_logger(__name__)

# Retries are ours alone; botocore must make exactly one HTTP attempt per call.
BOTO_CONFIG = Config(retries={"total_max_attempts": 1, "mode": "standard"})


class SNSVerificationService(VerificationSender):
    """Service for sending verification codes via AWS SNS"""

    def __init__(
        self,
        credentials: AuthCredentials,
        config: MessagingConfig,
        *,
        sns_client: Any = None,
        sts_client: Any = None,
        code_generator: CodeGenerator = generate_numeric_code,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not credentials.access_key_id or not credentials.secret_access_key:
            raise AuthError("AWS access key ID and secret access key are required")

        if sns_client is None or sts_client is None:
            try:
                session = boto3.session.Session(
                    aws_access_key_id=credentials.access_key_id,
                    aws_secret_access_key=credentials.secret_access_key,
                    region_name=credentials.region,
                )
                if sns_client is None:
                    sns_client = session.client("sns", config=BOTO_CONFIG)
                if sts_client is None:
                    sts_client = session.client("sts", config=BOTO_CONFIG)
            except BotoCoreError as e:
                raise ConfigError(
                    f"Cannot create AWS clients for region {credentials.region!r}: {e}",
                    details={"region": credentials.region}
                ) from e

        self._validate_credentials(sts_client, credentials.region)

        self._sns = sns_client
        self._config = config
        self._code_generator = code_generator
        self._sleep = sleep

    @staticmethod
    def _validate_credentials(sts_client: Any, region: str) -> None:
        try:
            identity = sts_client.get_caller_identity()
        except ClientError as e:
            raise AuthError(
                f"Invalid AWS credentials: {e}",
                details={"error_code": get_error_code(e), "region": region}
            ) from e
        except BotoCoreError as e:
            raise AuthError(
                f"Could not validate AWS credentials: {e}",
                details={"region": region}
            ) from e

        logger.info(
            "AWS credentials validated",
            extra={"account": identity.get("Account"), "region": region}
        )

    @property
    def config(self) -> MessagingConfig:
        return self._config

    def send_verification_code(
        self,
        destination_number: str,
        context: Optional[SendContext] = None
    ) -> SendOutcome:
        """
        Sends a freshly generated verification code.

        Args:
            destination_number: Recipient in E.164 format (+15551234567)
            context: Optional cancellation/deadline handle

        Returns:
            SendOutcome with the code on success, or with a SendError

        Raises:
            ValidationError: if the destination is not an E.164 number
        """
        if not validate_e164_number(destination_number):
            raise ValidationError(
                f"Destination is not a valid E.164 phone number: {destination_number!r}",
                details={"destination": destination_number}
            )

        code = self._code_generator(self._config.code_length)
        if not validate_code_format(code, self._config.code_length):
            raise ValidationError(
                f"Code generator returned an invalid code for length {self._config.code_length}",
                details={"code_length": self._config.code_length}
            )

        request = VerificationRequest(
            destination_number=destination_number,
            generated_code=code,
            message_body=build_verification_message(code, self._config.message_template),
        )

        with LogContext(destination=destination_number):
            try:
                receipt = self.dispatch_with_retry(
                    request.destination_number,
                    request.message_body,
                    context
                )
            except SendError as e:
                logger.error(f"Verification SMS failed: {e}", extra={"error_code": e.code})
                return SendOutcome(
                    destination_number=destination_number,
                    attempts=e.attempts,
                    error=e,
                )

        return SendOutcome(
            destination_number=destination_number,
            code=request.generated_code,
            message_id=receipt.message_id,
            attempts=receipt.attempts,
        )

    def dispatch_with_retry(
        self,
        destination: str,
        message: str,
        context: Optional[SendContext] = None
    ) -> DispatchReceipt:
        """
        Publishes `message` to `destination`, retrying up to max_retries
        times with a fixed delay.

        Raises:
            SendExhaustedError: every attempt failed
            SendRejectedError: permanent error with short-circuit enabled
            SendCancelledError: context cancelled or deadline passed
        """
        if context is None:
            context = SendContext()

        params = build_publish_params(
            destination,
            message,
            self._config.sms_type,
            self._config.sender_id
        )
        total_attempts = self._config.max_retries + 1
        last_error = None

        for attempt in range(1, total_attempts + 1):
            if attempt > 1:
                context.raise_if_done(destination, attempt - 1, last_error)
                logger.info(
                    f"Retrying SMS to {destination} (attempt {attempt}/{total_attempts})",
                    extra={"attempt": attempt}
                )
                self._sleep(self._config.retry_delay)

            context.raise_if_done(destination, attempt - 1, last_error)

            try:
                response = self._sns.publish(**params)
            except (ClientError, BotoCoreError) as e:
                last_error = e
                logger.warning(
                    f"SMS attempt {attempt}/{total_attempts} to {destination} failed: {e}",
                    extra={"attempt": attempt, "error_code": get_error_code(e)}
                )
                if not self._config.retry_permanent_errors and is_permanent_error(e):
                    raise SendRejectedError(destination, attempt, e) from e
                continue

            message_id = response["MessageId"]
            logger.info(
                f"SMS sent to {destination} (MessageID: {message_id})",
                extra={"attempt": attempt, "message_id": message_id}
            )
            return DispatchReceipt(message_id=message_id, attempts=attempt)

        raise SendExhaustedError(destination, total_attempts, last_error) from last_error


def create_sms_service(settings, **kwargs) -> SNSVerificationService:
    """
    Builds the SNS service from application settings.

    Raises:
        AuthError: if the credentials are rejected
    """
    return SNSVerificationService(settings.credentials(), settings.messaging(), **kwargs)
