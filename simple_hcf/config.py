"""Client settings read from HCF_* environment variables."""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class ClientSettings:
    service_name: str = "simple-hcf"
    base_url: str = ""
    # Per-hop socket timeouts in seconds
    connect_timeout: float = 2.0
    read_timeout: float = 10.0
    write_timeout: float = 5.0
    pool_timeout: float = 5.0
    max_connections: int = 100
    max_keepalive_connections: int = 20
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, prefix: str = "HCF_") -> "ClientSettings":
        defaults = cls()
        return cls(
            service_name=os.getenv(f"{prefix}SERVICE_NAME", defaults.service_name),
            base_url=os.getenv(f"{prefix}BASE_URL", defaults.base_url),
            connect_timeout=_env_float(f"{prefix}CONNECT_TIMEOUT", defaults.connect_timeout),
            read_timeout=_env_float(f"{prefix}READ_TIMEOUT", defaults.read_timeout),
            write_timeout=_env_float(f"{prefix}WRITE_TIMEOUT", defaults.write_timeout),
            pool_timeout=_env_float(f"{prefix}POOL_TIMEOUT", defaults.pool_timeout),
            max_connections=_env_int(f"{prefix}MAX_CONNECTIONS", defaults.max_connections),
            max_keepalive_connections=_env_int(
                f"{prefix}MAX_KEEPALIVE_CONNECTIONS", defaults.max_keepalive_connections
            ),
            log_level=os.getenv(f"{prefix}LOG_LEVEL", defaults.log_level),
        )

    def httpx_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.connect_timeout,
            read=self.read_timeout,
            write=self.write_timeout,
            pool=self.pool_timeout,
        )

    def httpx_limits(self) -> httpx.Limits:
        return httpx.Limits(
            max_connections=self.max_connections,
            max_keepalive_connections=self.max_keepalive_connections,
        )
