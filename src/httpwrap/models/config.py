"""Pydantic configuration models for httpwrap clients."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


def _expand_env_var(value: Optional[str]) -> Optional[str]:
    """Expand environment variable references in a string.

    Supports $VAR and ${VAR} syntax. Returns original value if
    the env var is not set.
    """
    import os
    import re

    if value is None:
        return None

    # Match $VAR or ${VAR}
    pattern = r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)"

    def replace(match: re.Match) -> str:
        var_name = match.group(1) or match.group(2)
        return os.environ.get(var_name, match.group(0))

    return re.sub(pattern, replace, value)


class ClientConfig(BaseModel):
    """
    Configuration shared by AsyncHttpClient and BlockingHttpClient.

    The bearer token supports environment variable expansion using
    $VAR or ${VAR} syntax, e.g. bearer_token='$API_TOKEN'.

    Example:
        config = ClientConfig(
            headers={"Content-Type": "application/json"},
            bearer_token="${API_TOKEN}",
            timeout=10.0,
        )

    YAML format:
        headers:
          Content-Type: application/json
        bearer_token: $API_TOKEN
        timeout: 10
        root_ca: ./certs/internal-ca.pem
    """

    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Headers added to every request, in insertion order",
    )
    bearer_token: Optional[str] = Field(None, description="Token sent as 'Authorization: Bearer <token>'")
    timeout: Optional[float] = Field(None, gt=0, description="Total request timeout in seconds (None = no timeout)")
    root_ca: Optional[Path] = Field(None, description="Extra PEM/DER root certificate trusted by this client")
    user_agent: Optional[str] = Field(None, description="Custom User-Agent header")
    proxy: Optional[str] = Field(None, description="HTTP/HTTPS proxy URL")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    @field_validator("headers")
    @classmethod
    def _unique_header_names(cls, headers: dict[str, str]) -> dict[str, str]:
        seen: set[str] = set()
        for name in headers:
            key = name.lower()
            if key in seen:
                raise ValueError(f"Duplicate header name (case-insensitive): {name}")
            seen.add(key)
        return headers

    def model_post_init(self, __context: object) -> None:
        """Expand environment variables in the bearer token after init."""
        if self.bearer_token:
            object.__setattr__(self, "bearer_token", _expand_env_var(self.bearer_token))

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ClientConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str) or {}
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "ClientConfig":
        """Load config from YAML file."""
        return cls.from_yaml(path.read_text())
