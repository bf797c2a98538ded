import os
from dataclasses import dataclass
from typing import Mapping, Optional

from amazon_shopping.errors import ConfigError

DEFAULT_AMAZON_HOST = "webservices.amazon.com"


class Config:
    def __init__(self):
        # Transport
        self.REQUEST_TIMEOUT = int(os.environ.get("REQUEST_TIMEOUT", "30"))

        # Error tracking
        self.SENTRY_DSN = os.environ.get("SENTRY_DSN", "")
        self.ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")

        # Application settings
        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    @property
    def has_sentry(self) -> bool:
        return bool(self.SENTRY_DSN)


@dataclass(frozen=True)
class AmazonCredentials:
    """Product Advertising API identity. Treated as immutable input by the client."""
    access_key_id: str
    secret_key: str
    partner_tag: str
    region: str
    host: str = DEFAULT_AMAZON_HOST


# (env var, field, message when missing)
_REQUIRED = (
    ("AWS_ACCESS_KEY_ID", "access_key_id", "AWS access key id is required"),
    ("AWS_SECRET_ACCESS_KEY", "secret_key", "AWS secret access key is required"),
    ("AMAZON_PARTNER_TAG", "partner_tag", "Amazon partner tag is required"),
    ("AMAZON_REGION", "region", "Amazon region is required"),
)


def load_amazon_credentials(environ: Optional[Mapping[str, str]] = None) -> AmazonCredentials:
    """
    Read Amazon credentials from the environment.

    Raises:
        ConfigError: listing every missing or blank variable
    """
    env = os.environ if environ is None else environ

    values = {}
    problems = []
    for name, field_name, message in _REQUIRED:
        value = env.get(name, "")
        if not value:
            problems.append(f"{name}: {message}")
        values[field_name] = value

    host = env.get("AMAZON_HOST", DEFAULT_AMAZON_HOST).strip()
    if not host:
        problems.append("AMAZON_HOST: Amazon host is required")

    if problems:
        details = "\n".join(problems)
        raise ConfigError(f"Invalid environment configuration.\n{details}")

    return AmazonCredentials(host=host, **values)


# Create an instance
config = Config()
