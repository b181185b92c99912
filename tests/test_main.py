import logging

import pytest

from conftest import FakeSNSClient, FakeSTSClient, fixed_code_generator, throttled
from smsverify import main as cli
from smsverify.core.exceptions import AuthError
from smsverify.services.sns_service import SNSVerificationService

CONFIG = """
aws:
  access_key_id: AKIAEXAMPLE
  secret_access_key: example-secret
  region: eu-west-2
sms:
  sender_id: OTPService
  max_retries: 2
  retry_delay: 0
  destination: "+447700900123"
"""


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG, encoding="utf-8")
    return path


def install_service(monkeypatch, outcomes, code="123456"):
    """Routes the CLI to an SNS service backed by scripted fakes."""
    sns = FakeSNSClient(outcomes)
    built = {}

    def factory(settings):
        service = SNSVerificationService(
            settings.credentials(),
            settings.messaging(),
            sns_client=sns,
            sts_client=FakeSTSClient(),
            code_generator=fixed_code_generator(code),
            sleep=lambda seconds: None,
        )
        built["settings"] = settings
        return service

    monkeypatch.setattr(cli, "create_sms_service", factory)
    return sns, built


def test_success_prints_code_and_exits_zero(monkeypatch, config_file, capsys):
    sns, _ = install_service(monkeypatch, [throttled(), "msg-2"], code="987654")

    status = cli.main([])

    assert status == 0
    assert capsys.readouterr().out.strip() == "Verification code sent successfully: 987654"
    assert sns.calls[0]["PhoneNumber"] == "+447700900123"
    assert len(sns.calls) == 2


def test_destination_argument_overrides_config(monkeypatch, config_file):
    sns, _ = install_service(monkeypatch, ["msg-1"])

    assert cli.main(["+1 (555) 123-4567"]) == 0
    assert sns.calls[0]["PhoneNumber"] == "+15551234567"


def test_explicit_config_path(monkeypatch, tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text(CONFIG, encoding="utf-8")
    _, built = install_service(monkeypatch, ["msg-1"])

    assert cli.main(["--config", str(path)]) == 0
    assert built["settings"].aws.region == "eu-west-2"


def test_exhaustion_exits_non_zero(monkeypatch, config_file, capsys):
    sns, _ = install_service(monkeypatch, [throttled(), throttled(), throttled()])

    status = cli.main([])

    assert status == 69
    assert capsys.readouterr().out == ""
    assert len(sns.calls) == 3


def test_missing_config_exits_non_zero(capsys):
    assert cli.main([]) == 78
    assert capsys.readouterr().out == ""


def test_auth_failure_exits_non_zero(monkeypatch, config_file):
    def factory(settings):
        raise AuthError("Invalid AWS credentials")

    monkeypatch.setattr(cli, "create_sms_service", factory)

    assert cli.main([]) == 77


def test_missing_destination_exits_non_zero(monkeypatch, tmp_path):
    (tmp_path / "config.yaml").write_text(CONFIG.replace('  destination: "+447700900123"\n', ""), encoding="utf-8")
    sns, _ = install_service(monkeypatch, ["msg-1"])

    assert cli.main([]) == 65
    assert sns.calls == []


def test_invalid_destination_exits_non_zero(monkeypatch, config_file):
    sns, _ = install_service(monkeypatch, ["msg-1"])

    assert cli.main(["not-a-number"]) == 65
    assert sns.calls == []


def test_malformed_region_exits_with_config_status(monkeypatch, tmp_path, caplog):
    (tmp_path / "config.yaml").write_text(CONFIG.replace("eu-west-2", "eu_west_2"), encoding="utf-8")
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)
    sns, _ = install_service(monkeypatch, ["msg-1"])

    with caplog.at_level(logging.CRITICAL):
        assert cli.main([]) == 78

    assert sns.calls == []
    assert "CONFIG_ERROR" in caplog.text


def test_unexpected_exception_is_reported_not_raised(monkeypatch, config_file, caplog):
    def factory(settings):
        raise RuntimeError("boom")

    monkeypatch.setattr(cli, "create_sms_service", factory)
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)

    with caplog.at_level(logging.CRITICAL):
        assert cli.main([]) == 1

    assert "Unhandled exception: boom" in caplog.text
