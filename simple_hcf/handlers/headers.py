"""Handlers that stamp headers on outbound requests.

The same request object is re-sent on every retry, so each handler only
writes values that are stable across attempts.
"""
from __future__ import annotations

import time
import uuid

import httpx

from simple_hcf.pipeline import MessageHandler, Send
from simple_hcf.resilience.timeout import DEADLINE_HEADER

IDEMPOTENCY_HEADER = "Idempotency-Key"
MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH"})


def header_handler(name: str, value: str, *, overwrite: bool = True) -> MessageHandler:
    """Set *name* to *value* on every request."""

    async def _handler(request: httpx.Request, next_send: Send) -> httpx.Response:
        if overwrite or name not in request.headers:
            request.headers[name] = value
        return await next_send(request)

    return _handler


def idempotency_key_handler() -> MessageHandler:
    """Give POST/PUT/PATCH requests an Idempotency-Key if they lack one."""

    async def _handler(request: httpx.Request, next_send: Send) -> httpx.Response:
        if request.method in MUTATING_METHODS and IDEMPOTENCY_HEADER not in request.headers:
            request.headers[IDEMPOTENCY_HEADER] = str(uuid.uuid4())
        return await next_send(request)

    return _handler


def deadline_handler(seconds: float) -> MessageHandler:
    """Propagate an absolute deadline *seconds* after the first attempt."""

    async def _handler(request: httpx.Request, next_send: Send) -> httpx.Response:
        if DEADLINE_HEADER not in request.headers:
            request.headers[DEADLINE_HEADER] = str(time.time() + seconds)
        return await next_send(request)

    return _handler
