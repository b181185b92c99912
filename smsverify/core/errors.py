import logging

from smsverify.core.exceptions import SMSVerifyError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def report_error(exc: BaseException, debug: bool = False) -> int:
    """
    Logs an error raised at the process boundary and returns the exit status.
    """
    if isinstance(exc, SMSVerifyError):
        logger.critical(
            f"{exc.code}: {exc}",
            extra={"error_code": exc.code, "details": exc.details},
            exc_info=debug,
        )
        return exc.exit_code

    logger.critical(f"Unhandled exception: {exc}", exc_info=True)
    return EXIT_FAILURE
