"""Builder that assembles policies and handlers into a PipelineClient.

Each ``with_*`` call returns a new builder, so a partially configured
builder can be shared and specialised without the copies affecting each
other.  The resulting pipeline is::

    policies[0] -> ... -> policies[-1] -> handlers[0] -> ... -> handlers[-1] -> transport
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

import httpx

from simple_hcf.client import PipelineClient
from simple_hcf.config import ClientSettings
from simple_hcf.exceptions import PipelineConfigurationError
from simple_hcf.pipeline import MessageHandler, Policy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineBuilder:
    policies: tuple[Policy, ...] = ()
    handlers: tuple[MessageHandler, ...] = ()
    settings: ClientSettings = field(default_factory=ClientSettings.from_env)
    base_url: Optional[str] = None
    default_headers: tuple[tuple[str, str], ...] = ()
    transport: Optional[httpx.AsyncBaseTransport] = None

    @classmethod
    def create(cls) -> "PipelineBuilder":
        return cls()

    def with_policy(self, policy: Policy) -> "PipelineBuilder":
        """Add *policy* inside every policy registered before it."""
        if not callable(policy):
            raise PipelineConfigurationError(f"policy must be callable, got {policy!r}")
        return replace(self, policies=self.policies + (policy,))

    def with_message_handler(self, handler: MessageHandler) -> "PipelineBuilder":
        """Add *handler* after every handler registered before it."""
        if not callable(handler):
            raise PipelineConfigurationError(f"message handler must be callable, got {handler!r}")
        return replace(self, handlers=self.handlers + (handler,))

    def with_settings(self, settings: ClientSettings) -> "PipelineBuilder":
        return replace(self, settings=settings)

    def with_base_url(self, base_url: str) -> "PipelineBuilder":
        return replace(self, base_url=base_url)

    def with_default_headers(self, headers: Mapping[str, str]) -> "PipelineBuilder":
        """Merge *headers* in; a name set again replaces its earlier value."""
        merged = httpx.Headers(list(self.default_headers))
        for name, value in headers.items():
            merged[name] = value
        return replace(self, default_headers=tuple(merged.items()))

    def with_transport(self, transport: httpx.AsyncBaseTransport) -> "PipelineBuilder":
        return replace(self, transport=transport)

    def build(self) -> PipelineClient:
        base_url = self.base_url if self.base_url is not None else self.settings.base_url
        http = httpx.AsyncClient(
            base_url=base_url,
            headers=list(self.default_headers),
            timeout=self.settings.httpx_timeout(),
            limits=self.settings.httpx_limits(),
            transport=self.transport,
        )
        logger.debug(
            "pipeline_built",
            extra={
                "service": self.settings.service_name,
                "policies": len(self.policies),
                "handlers": len(self.handlers),
                "base_url": base_url,
            },
        )
        return PipelineClient(http, self.policies, self.handlers)
