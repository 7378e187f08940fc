from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Application API
    api_host: str = "localhost"
    api_port: int = 8080

    # Health port (separate listener from the API)
    health_bind_address: str = "0.0.0.0:8085"
    health_parallel_probes: bool = False

    # Probe thresholds
    worker_threshold: int = 100
    dns_hostname: str = "upstream.example.com"
    dns_timeout_ms: int = 50
    memory_limit_mib: int = 200

    # Logging
    log_level: str = "INFO"

    @property
    def health_host(self) -> str:
        return _split_bind_address(self.health_bind_address)[0]

    @property
    def health_port(self) -> int:
        return _split_bind_address(self.health_bind_address)[1]


def _split_bind_address(address: str) -> tuple[str, int]:
    """Split ``host:port`` into its parts. An empty host means all interfaces."""
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid bind address: {address!r} (expected host:port)")
    return host.strip("[]") or "0.0.0.0", int(port)


settings = Settings()
