"""Request pipeline primitives.

A pipeline is a single ``Send`` callable built from three layers:

    policy[0](policy[1](... handler[0] -> handler[1] -> ... -> terminal))

Handlers receive the downstream ``Send`` as an explicit ``next`` argument and
compose by delegation.  Policies are decorators over a ``Send`` and compose
outer-to-inner in registration order.
"""
from __future__ import annotations

from typing import Awaitable, Callable, Sequence

import httpx

Send = Callable[[httpx.Request], Awaitable[httpx.Response]]
MessageHandler = Callable[[httpx.Request, Send], Awaitable[httpx.Response]]
Policy = Callable[[Send], Send]


def compose_handlers(handlers: Sequence[MessageHandler], terminal: Send) -> Send:
    """Chain *handlers* in front of *terminal*; the first handler runs first."""
    send = terminal
    for handler in reversed(handlers):
        send = _bind(handler, send)
    return send


def compose_policies(policies: Sequence[Policy], send: Send) -> Send:
    """Wrap *send* so the first registered policy is the outermost one."""
    for policy in reversed(policies):
        send = policy(send)
    return send


def build_pipeline(
    policies: Sequence[Policy],
    handlers: Sequence[MessageHandler],
    terminal: Send,
) -> Send:
    # Policies always sit outside the handler chain, so every retry or
    # timeout re-enters the first handler.
    return compose_policies(policies, compose_handlers(handlers, terminal))


def _bind(handler: MessageHandler, next_send: Send) -> Send:
    async def _send(request: httpx.Request) -> httpx.Response:
        return await handler(request, next_send)

    return _send
