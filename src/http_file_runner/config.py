"""Client configuration shared by all executors."""

from pathlib import Path

import httpx
from pydantic import BaseModel, Field

from http_file_runner.env import SslConfiguration

DEFAULT_TIMEOUT = 30.0
DEFAULT_IDLE_TIMEOUT = 2.0


class ClientConfig(BaseModel):
    """Network settings for one run.

    `timeout` bounds every connect and every awaited response;
    `idle_timeout` bounds optional reads, such as the trailing listen of a
    WebSocket exchange.
    """

    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    idle_timeout: float = Field(default=DEFAULT_IDLE_TIMEOUT, gt=0)
    verify: bool = True
    proxy: str | None = None
    client_cert: Path | None = None
    client_key: Path | None = None
    follow_redirects: bool = True

    def with_ssl_config(self, ssl_config: SslConfiguration, base_path: Path) -> "ClientConfig":
        """Return a copy with an environment's SSL settings applied.

        Relative certificate paths are resolved against base_path.
        """
        updates = {}
        if ssl_config.verify_host_certificate is not None:
            updates["verify"] = ssl_config.verify_host_certificate
        if ssl_config.client_certificate:
            updates["client_cert"] = resolve_cert_path(base_path, ssl_config.client_certificate)
        if ssl_config.client_certificate_key:
            updates["client_key"] = resolve_cert_path(base_path, ssl_config.client_certificate_key)
        return self.model_copy(update=updates)

    def cert(self) -> tuple[str, str] | str | None:
        if self.client_cert is None:
            return None
        if self.client_key is None:
            return str(self.client_cert)
        return str(self.client_cert), str(self.client_key)

    def build_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self.timeout,
            verify=self.verify,
            proxy=self.proxy,
            cert=self.cert(),
            follow_redirects=self.follow_redirects,
        )


def resolve_cert_path(base_path: Path, cert_path: str) -> Path:
    path = Path(cert_path)
    if path.is_absolute():
        return path
    return Path(base_path) / path
