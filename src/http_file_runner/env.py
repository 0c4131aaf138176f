"""Environment files and {{VAR}} template substitution.

Environment files follow the IntelliJ HTTP client layout:

    {
      "dev": {
        "host": "https://dev.example.com",
        "SSLConfiguration": {"verifyHostCertificate": false}
      }
    }

`http-client.env.json` holds shared values, `http-client.private.env.json`
holds secrets and overrides the shared file. YAML files with the same
shape are accepted as well.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from http_file_runner.errors import EnvironmentFileError

logger = logging.getLogger(__name__)

DEFAULT_ENV = "default"
ENV_FILE_NAME = "http-client.env.json"
PRIVATE_ENV_FILE_NAME = "http-client.private.env.json"

SSL_KEYS = ("SSLConfiguration", "ssl_config")

VARIABLE_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


class SslConfiguration(BaseModel):
    """Per-environment TLS settings."""

    model_config = ConfigDict(populate_by_name=True)

    client_certificate: str | None = Field(default=None, alias="clientCertificate")
    client_certificate_key: str | None = Field(default=None, alias="clientCertificateKey")
    has_certificate_passphrase: bool | None = Field(default=None, alias="hasCertificatePassphrase")
    verify_host_certificate: bool | None = Field(default=None, alias="verifyHostCertificate")

    @field_validator("client_certificate", "client_certificate_key", mode="before")
    @classmethod
    def _certificate_path(cls, value: Any) -> Any:
        # either a plain path or {"path": ..., "format": ...}
        if isinstance(value, dict):
            return value.get("path")
        return value


class Environment(BaseModel):
    variables: dict[str, Any] = {}
    ssl_config: SslConfiguration | None = None


class EnvironmentManager:
    """Holds every loaded environment and resolves template placeholders."""

    def __init__(self, environments: dict[str, Environment] | None = None):
        self.environments: dict[str, Environment] = dict(environments or {})

    def load_env_file(self, path: Path) -> None:
        """Merge an environment file; its values override those already loaded."""
        path = Path(path)
        for name, env in _read_env_file(path).items():
            current = self.environments.get(name)
            if current is None:
                self.environments[name] = env
                continue
            variables = {**current.variables, **env.variables}
            ssl_config = env.ssl_config or current.ssl_config
            self.environments[name] = Environment(variables=variables, ssl_config=ssl_config)
        logger.debug("Loaded environment file %s", path)

    def load_env_files(
        self,
        base_path: Path,
        env_file: Path | None = None,
        private_env_file: Path | None = None,
    ) -> None:
        """Load the shared then the private env file.

        An explicit path replaces only its own default; a missing default
        file next to base_path is skipped, a missing explicit one is an error.
        """
        for explicit, file_name in ((env_file, ENV_FILE_NAME), (private_env_file, PRIVATE_ENV_FILE_NAME)):
            if explicit is not None:
                self.load_env_file(explicit)
                continue
            path = Path(base_path) / file_name
            if path.exists():
                self.load_env_file(path)

    def get_environment(self, env_name: str) -> Environment | None:
        return self.environments.get(env_name)

    def resolve_variable(self, env_name: str, var_name: str) -> str | None:
        env = self.environments.get(env_name)
        if env is None or var_name not in env.variables:
            return None
        value = env.variables[var_name]
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (str, int, float)):
            return str(value)
        return None

    def resolve(self, env_name: str, text: str) -> str:
        """Replace {{name}} placeholders. Unknown names are left as written."""

        def replace_match(match: re.Match) -> str:
            value = self.resolve_variable(env_name, match.group(1).strip())
            return match.group(0) if value is None else value

        return VARIABLE_PATTERN.sub(replace_match, text)

    def resolve_dict(self, env_name: str, data: dict[str, str]) -> dict[str, str]:
        return {key: self.resolve(env_name, value) for key, value in data.items()}

    def get_ssl_config(self, env_name: str) -> SslConfiguration | None:
        env = self.environments.get(env_name)
        return env.ssl_config if env else None


def _read_env_file(path: Path) -> dict[str, Environment]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise EnvironmentFileError(path, str(e)) from e

    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise EnvironmentFileError(path, str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise EnvironmentFileError(path, "expected an object of environments")

    environments = {}
    for name, values in data.items():
        if not isinstance(values, dict):
            raise EnvironmentFileError(path, f"environment '{name}' is not an object")
        variables = dict(values)
        ssl_data = None
        for key in SSL_KEYS:
            if key in variables:
                ssl_data = variables.pop(key)
        try:
            ssl_config = SslConfiguration.model_validate(ssl_data) if ssl_data else None
        except ValidationError as e:
            raise EnvironmentFileError(path, f"invalid SSL configuration in '{name}': {e}") from e
        environments[name] = Environment(variables=variables, ssl_config=ssl_config)
    return environments
