from typing import Optional, Any


class SMSVerifyError(Exception):
    """
    Base exception for the smsverify application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", exit_code: int = 1, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.exit_code = exit_code
        self.details = details
        super().__init__(self.message)


class ConfigError(SMSVerifyError):
    """
    Raised when the config source is missing, unreadable or malformed.
    """
    def __init__(self, message: str = "Configuration error", details: Optional[Any] = None):
        super().__init__(message, code="CONFIG_ERROR", exit_code=78, details=details)


class AuthError(SMSVerifyError):
    """
    Raised when the provider rejects the supplied credentials.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", exit_code=77, details=details)


class ValidationError(SMSVerifyError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", exit_code=65, details=details)


class SendError(SMSVerifyError):
    """
    Raised when a verification SMS could not be delivered to the provider.

    Carries the destination, the number of attempts made and the last
    provider error.
    """
    def __init__(
        self,
        message: str,
        destination: str,
        attempts: int,
        cause: Optional[BaseException] = None,
        code: str = "SEND_FAILED",
        exit_code: int = 69,
    ):
        self.destination = destination
        self.attempts = attempts
        self.cause = cause
        super().__init__(
            message,
            code=code,
            exit_code=exit_code,
            details={
                "destination": destination,
                "attempts": attempts,
                "cause": str(cause) if cause is not None else None,
            },
        )

    def __str__(self) -> str:
        reason = self.cause if self.cause is not None else self.message
        return f"SMS error [{self.code}] for {self.destination}: {reason}"


class SendExhaustedError(SendError):
    """
    Raised when every permitted attempt (initial + retries) failed.
    """
    def __init__(self, destination: str, attempts: int, cause: Optional[BaseException] = None):
        super().__init__(
            f"Giving up on {destination} after {attempts} attempt(s)",
            destination,
            attempts,
            cause,
            code="SEND_MAX_RETRIES_EXCEEDED",
        )


class SendRejectedError(SendError):
    """
    Raised when the provider returns a non-retryable error and
    short-circuiting is enabled.
    """
    def __init__(self, destination: str, attempts: int, cause: Optional[BaseException] = None):
        super().__init__(
            f"Provider rejected message to {destination}",
            destination,
            attempts,
            cause,
            code="SEND_REJECTED",
        )


class SendCancelledError(SendError):
    """
    Raised when the send context is cancelled or its deadline passes.
    """
    def __init__(self, destination: str, attempts: int, cause: Optional[BaseException] = None, reason: str = "cancelled"):
        self.reason = reason
        super().__init__(
            f"Send to {destination} {reason} after {attempts} attempt(s)",
            destination,
            attempts,
            cause,
            code="SEND_CANCELLED",
            exit_code=75,
        )
