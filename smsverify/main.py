"""
smsverify/main.py

Purpose: Application entry point

- Loads configuration and logging
- Builds the SNS verification service (credentials validated once)
- Sends one verification code and prints it
- No business logic should be written here
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from smsverify.core.config import load_settings
from smsverify.core.context import SendContext
from smsverify.core.errors import EXIT_OK, report_error
from smsverify.core.exceptions import SMSVerifyError, ValidationError
from smsverify.core.logging import get_logger, setup_logging
from smsverify.services.sns_service import create_sms_service
from utils.constants import SUCCESS_MESSAGE
from utils.validation_utils import normalize_phone_number

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smsverify",
        description="Send a one-time verification code by SMS via AWS SNS."
    )
    parser.add_argument(
        "destination",
        nargs="?",
        help="Destination number in E.164 format (default: sms.destination from config)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: $SMSVERIFY_CONFIG or ./config.yaml)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.config)
    except SMSVerifyError as e:
        setup_logging()
        return report_error(e)

    setup_logging(settings.log_level, settings.environment)
    logger.info(f"Starting smsverify (environment: {settings.environment}, region: {settings.aws.region})")

    try:
        destination = normalize_phone_number(args.destination or settings.sms.destination or "")
        if not destination:
            raise ValidationError("No destination number given (argument or sms.destination)")

        service = create_sms_service(settings)

        if settings.sms.send_timeout:
            context = SendContext.with_timeout(settings.sms.send_timeout)
        else:
            context = SendContext()

        outcome = service.send_verification_code(destination, context)
    except SMSVerifyError as e:
        return report_error(e, debug=settings.log_level == "DEBUG")
    except Exception as e:
        return report_error(e)

    if not outcome.success:
        return report_error(outcome.error, debug=settings.log_level == "DEBUG")

    print(SUCCESS_MESSAGE.format(code=outcome.code))
    return EXIT_OK


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
