"""
smsverify/core/config.py

Purpose: Application configuration

- Discovers and reads the YAML config file
- Overlays environment variables (SMSVERIFY_*) and .env
- Validates configuration on startup
- Projects settings onto the immutable messaging data model
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings

from smsverify.core.exceptions import ConfigError
from smsverify.schemas.sms import AuthCredentials, MessagingConfig
from utils.constants import DEFAULT_MESSAGE_TEMPLATE, SMS_TYPE_TRANSACTIONAL

CONFIG_ENV_VAR = "SMSVERIFY_CONFIG"
CONFIG_FILENAMES = ("config.yaml", "config.yml")
# Same shape botocore accepts for region_name
REGION_PATTERN = re.compile(r"[a-z0-9](?:[a-z0-9\-]{0,61}[a-z0-9])?")


class AWSSettings(BaseModel):
    """Provider authentication (the `aws:` section)."""

    access_key_id: str = Field(default="", description="AWS access key ID")
    secret_access_key: str = Field(default="", description="AWS secret access key")
    region: str = Field(default="us-east-1", description="AWS region hosting SNS")

    @validator("access_key_id", "secret_access_key", "region")
    def strip_whitespace(cls, v):
        return v.strip()

    @validator("region")
    def validate_region(cls, v):
        if v and not REGION_PATTERN.fullmatch(v):
            raise ValueError(f"Malformed AWS region: {v!r} (expected e.g. eu-west-2)")
        return v


class SMSSettings(BaseModel):
    """Messaging policy (the `sms:` section)."""

    sender_id: Optional[str] = Field(
        default=None,
        description="Sender label shown to the recipient, where supported"
    )
    sms_type: Literal["Transactional", "Promotional"] = Field(
        default=SMS_TYPE_TRANSACTIONAL,
        description="SNS message classification"
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        description="Retries after the initial attempt"
    )
    retry_delay: float = Field(
        default=2.0,
        ge=0,
        description="Fixed delay between attempts in seconds"
    )
    code_length: int = Field(
        default=6,
        ge=4,
        le=12,
        description="Number of digits in the verification code"
    )
    message_template: str = Field(
        default=DEFAULT_MESSAGE_TEMPLATE,
        description="Message body; {code} is replaced by the verification code"
    )
    retry_permanent_errors: bool = Field(
        default=True,
        description="Retry errors the provider reports as permanent (e.g. invalid number)"
    )
    destination: Optional[str] = Field(
        default=None,
        description="Default destination number (E.164) for the CLI"
    )
    send_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Overall deadline for one send, in seconds"
    )

    @validator("sender_id")
    def validate_sender_id(cls, v):
        """SNS sender IDs are 1-11 alphanumeric characters."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            return None
        if len(v) > 11 or not v.isalnum():
            raise ValueError("sender_id must be 1-11 alphanumeric characters")
        return v

    @validator("message_template")
    def validate_message_template(cls, v):
        if "{code}" not in v:
            raise ValueError("message_template must contain a {code} placeholder")
        return v


class Settings(BaseSettings):
    """
    Application settings loaded from the config file and environment.
    Environment variables take precedence over the file.
    """

    environment: Literal["development", "staging", "production"] = "development"
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    aws: AWSSettings = Field(default_factory=AWSSettings)
    sms: SMSSettings = Field(default_factory=SMSSettings)

    @validator("log_level")
    def validate_log_level(cls, v):
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    def credentials(self) -> AuthCredentials:
        return AuthCredentials(
            access_key_id=self.aws.access_key_id,
            secret_access_key=self.aws.secret_access_key,
            region=self.aws.region,
        )

    def messaging(self) -> MessagingConfig:
        return MessagingConfig(
            sender_id=self.sms.sender_id,
            sms_type=self.sms.sms_type,
            max_retries=self.sms.max_retries,
            retry_delay=self.sms.retry_delay,
            code_length=self.sms.code_length,
            message_template=self.sms.message_template,
            retry_permanent_errors=self.sms.retry_permanent_errors,
        )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # File values arrive as init kwargs; the environment overrides them.
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    class Config:
        env_prefix = "SMSVERIFY_"
        env_nested_delimiter = "__"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


def find_config_file(path: Optional[Union[str, Path]] = None) -> Path:
    """
    Locates the config file.

    An explicit path (argument or SMSVERIFY_CONFIG) must exist. Otherwise
    config.yaml / config.yml in the working directory is used.

    Raises:
        ConfigError: if no config file can be found
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or None

    if path is not None:
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigError(f"Config file not found: {config_path}")
        return config_path

    searched = []
    for name in CONFIG_FILENAMES:
        candidate = Path.cwd() / name
        if candidate.is_file():
            return candidate
        searched.append(str(candidate))

    raise ConfigError(
        "No config file found",
        details={"searched": searched}
    )


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as e:
        raise ConfigError(f"Error reading config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")
    return data


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """
    Loads and validates settings.

    Raises:
        ConfigError: on any discovery, parse or validation failure
    """
    config_path = find_config_file(path)
    data = _load_yaml(config_path)

    try:
        settings = Settings(**data)
    except PydanticValidationError as e:
        raise ConfigError(
            f"Invalid configuration in {config_path}",
            details=e.errors(include_url=False, include_context=False)
        ) from e

    validate_settings(settings)
    return settings


def validate_settings(settings: Settings) -> bool:
    """
    Validates critical settings on application startup.
    Raises ConfigError if any required setting is missing.
    """
    errors = []

    if not settings.aws.access_key_id:
        errors.append("aws.access_key_id is required")
    if not settings.aws.secret_access_key:
        errors.append("aws.secret_access_key is required")
    if not settings.aws.region:
        errors.append("aws.region is required")

    if errors:
        raise ConfigError(
            f"Configuration validation failed: {', '.join(errors)}",
            details=errors
        )

    return True
