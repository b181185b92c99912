import os

import boto3
import pytest
from botocore.exceptions import ClientError
from botocore.stub import Stubber

from smsverify.schemas.sms import AuthCredentials, MessagingConfig

DESTINATION = "+15551234567"
CALLER_IDENTITY = {
    "UserId": "AIDAEXAMPLEUSERID",
    "Account": "123456789012",
    "Arn": "arn:aws:iam::123456789012:user/smsverify",
}


def throttled(message: str = "Rate exceeded") -> ClientError:
    return ClientError({"Error": {"Code": "Throttled", "Message": message}}, "Publish")


def invalid_parameter(message: str = "Invalid parameter: PhoneNumber") -> ClientError:
    return ClientError({"Error": {"Code": "InvalidParameter", "Message": message}}, "Publish")


def fixed_code_generator(code: str):
    """Code generator that always yields `code`, whatever length is asked for."""
    def _generate(length: int) -> str:
        return code
    return _generate


class FakeClock:
    """Monotonic clock whose time only moves when sleep() is called."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeSNSClient:
    """
    Stand-in for the SNS client. Each publish consumes the next scripted
    outcome: an exception is raised, anything else is used as the MessageId.
    """

    def __init__(self, outcomes, clock=None):
        self.outcomes = list(outcomes)
        self.clock = clock
        self.calls = []
        self.call_times = []

    def publish(self, **params):
        self.calls.append(params)
        if self.clock is not None:
            self.call_times.append(self.clock())
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return {"MessageId": outcome}


class FakeSTSClient:
    def __init__(self, error=None):
        self.error = error
        self.calls = 0

    def get_caller_identity(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return dict(CALLER_IDENTITY)


@pytest.fixture
def credentials():
    return AuthCredentials(
        access_key_id="AKIATESTTESTTEST",
        secret_access_key="secret",
        region="us-east-1",
    )


@pytest.fixture
def messaging_config():
    return MessagingConfig(
        sender_id="OTPService",
        sms_type="Transactional",
        max_retries=3,
        retry_delay=0,
    )


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_sts():
    return FakeSTSClient()


@pytest.fixture
def sns_stub():
    client = boto3.client(
        "sns",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    with Stubber(client) as stubber:
        yield client, stubber
        stubber.assert_no_pending_responses()


@pytest.fixture
def sts_stub():
    client = boto3.client(
        "sts",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    with Stubber(client) as stubber:
        yield client, stubber


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Keep local config files and SMSVERIFY_* variables out of tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SMSVERIFY_CONFIG", raising=False)
    for name in ("AWS_PROFILE", "AWS_DEFAULT_PROFILE"):
        monkeypatch.delenv(name, raising=False)
    for name in list(os.environ):
        if name.upper().startswith("SMSVERIFY_"):
            monkeypatch.delenv(name, raising=False)
