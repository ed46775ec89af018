"""Gateway credentials and Basic-Auth header derivation.

Credentials are resolved once per executor invocation and never cached
beyond it. The Authorization header is derived from them for every single
request, so a resolver that rotates secrets between calls is always honoured.
"""
import base64
import os
from typing import Any, Dict, List, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import DEFAULT_BASE_URL
from .errors import ConfigurationError


# Credential inputs the host must collect (masked fields are secrets).
CREDENTIAL_FIELDS: List[Dict[str, Any]] = [
    {
        "name": "baseUrl",
        "display_name": "API Base URL",
        "type": "string",
        "default": DEFAULT_BASE_URL,
        "required": True,
        "masked": False,
        "description": "The base URL of the Corda node REST gateway",
    },
    {
        "name": "username",
        "display_name": "Username",
        "type": "string",
        "default": "",
        "required": True,
        "masked": False,
        "description": "RPC username configured in the Corda node",
    },
    {
        "name": "password",
        "display_name": "Password",
        "type": "string",
        "default": "",
        "required": True,
        "masked": True,
        "description": "RPC password for the configured user",
    },
]


class Credentials(BaseModel):
    """Resolved gateway credentials.

    An empty base URL falls back to the local node default; a trailing
    slash is dropped so paths can be appended directly.
    """
    base_url: str = Field(default=DEFAULT_BASE_URL, alias="baseUrl")
    username: str = ""
    password: str = Field(default="", repr=False)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("base_url", mode="before")
    @classmethod
    def _normalize_base_url(cls, value: Any) -> str:
        if not value:
            return DEFAULT_BASE_URL
        return str(value).rstrip("/")


def basic_auth_header(credentials: Credentials) -> str:
    """Return the ``Authorization`` header value for the given credentials."""
    token = f"{credentials.username}:{credentials.password}".encode("utf-8")
    return "Basic " + base64.b64encode(token).decode("ascii")


class CredentialResolver(Protocol):
    """Supplies credentials to an executor invocation."""

    def resolve(self) -> Credentials:
        ...


class StaticCredentialResolver:
    """Resolver returning a fixed set of credentials."""

    def __init__(self, credentials: Credentials):
        self._credentials = credentials

    def resolve(self) -> Credentials:
        return self._credentials


class EnvCredentialResolver:
    """Resolver reading ``CORDA_BASE_URL``, ``CORDA_USERNAME`` and ``CORDA_PASSWORD``.

    The environment is read on every ``resolve()`` call.
    """

    def __init__(self, prefix: str = "CORDA_"):
        self._prefix = prefix

    def resolve(self) -> Credentials:
        username = os.getenv(f"{self._prefix}USERNAME")
        password = os.getenv(f"{self._prefix}PASSWORD")
        for variable, value in (("USERNAME", username), ("PASSWORD", password)):
            if value is None:
                raise ConfigurationError(
                    f"Missing required environment variable: {self._prefix}{variable}",
                    details={"variable": f"{self._prefix}{variable}"}
                )
        return Credentials(
            base_url=os.getenv(f"{self._prefix}BASE_URL", DEFAULT_BASE_URL),
            username=username,
            password=password,
        )
