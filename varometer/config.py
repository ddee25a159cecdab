"""Connection settings and request policies for the VarOmeter client.

Settings are resolved once and passed explicitly into ``VarOmeterClient``;
nothing here reads global state after construction.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from varometer.exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://bim3.e-nios.com"
API_KEY_ENV_VAR = "ENIOS_API_KEY"
BASE_URL_ENV_VAR = "VAROMETER_BASE_URL"

# HTTP statuses eligible for automatic retry (524 = gateway timeout behind Cloudflare)
TRANSIENT_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504, 524})
BACKOFF_BASE_SECONDS = 1
BACKOFF_CAP_SECONDS = 60


@dataclass(frozen=True)
class RequestPolicy:
    """Per-request timeout and retry ceiling.

    Attributes:
        timeout_seconds: Client-side timeout applied to each attempt
        max_tries: Total attempts allowed for transient failures
    """

    timeout_seconds: float = 180
    max_tries: int = 5


DEFAULT_POLICY = RequestPolicy(timeout_seconds=180, max_tries=5)
# Large textDataset uploads are slow to accept
EXPERIMENT_POLICY = RequestPolicy(timeout_seconds=240, max_tries=5)
RUN_POLICY = RequestPolicy(timeout_seconds=300, max_tries=6)
RESULTS_POLICY = RequestPolicy(timeout_seconds=180, max_tries=6)


class Settings(BaseModel):
    base_url: str = Field(default=DEFAULT_BASE_URL, description="VarOmeter API host")
    api_key: Optional[str] = Field(default=None, description="enios API key")
    api_key_header: str = Field(
        default="enios-api-key",
        description="Header carrying the API key"
    )

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("base_url cannot be empty")
        return v

    @field_validator('api_key')
    @classmethod
    def validate_api_key(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None

    @classmethod
    def from_env(
        cls,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Settings":
        """Build settings from explicit values, falling back to the environment.

        Explicit arguments win; otherwise ``ENIOS_API_KEY`` and
        ``VAROMETER_BASE_URL`` are consulted, then the default host.
        """
        env = os.environ if environ is None else environ

        if not (api_key and api_key.strip()):
            api_key = env.get(API_KEY_ENV_VAR)
        if not (base_url and base_url.strip()):
            base_url = (env.get(BASE_URL_ENV_VAR) or "").strip() or DEFAULT_BASE_URL

        return cls(base_url=base_url, api_key=api_key)

    def require_api_key(self) -> str:
        """Return the API key or raise ConfigurationError if it is missing."""
        if not self.api_key:
            raise ConfigurationError(
                f"Missing API key. Set env var {API_KEY_ENV_VAR} "
                f"or pass api_key explicitly."
            )
        return self.api_key

    def url_for(self, path: str) -> str:
        """Join an API path (``/api/...``) onto the base URL."""
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{path}"
