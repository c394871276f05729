from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, NamedTuple, ParamSpec
import functools
import logging
import math


LOGGER = logging.getLogger(__name__)

# Payload of operations that have nothing meaningful to return.
NO_PAYLOAD = math.nan

P = ParamSpec("P")


class ServiceCallFailure(RuntimeError):
    """Raised when a Firebase call (or a wrapper precondition) fails."""


class Outcome(NamedTuple):
    """Two-element result returned by every wrapper method.

    Unpacks like a plain tuple: ``ok, payload = await model.read()``.
    On failure ``payload`` is the error message.
    """

    ok: bool
    payload: Any

    def unwrap(self) -> Any:
        if not self.ok:
            raise ServiceCallFailure(str(self.payload))
        return self.payload


def success(payload: Any = NO_PAYLOAD) -> Outcome:
    return Outcome(True, payload)


def failure(error: BaseException | str) -> Outcome:
    if isinstance(error, BaseException):
        message = str(error).strip() or error.__class__.__name__
    else:
        message = error
    return Outcome(False, message)


def service_call(func: Callable[P, Awaitable[Outcome]]) -> Callable[P, Awaitable[Outcome]]:
    """Convert any exception escaping ``func`` into a failed outcome."""

    @functools.wraps(func)
    async def _wrapper(*args: P.args, **kwargs: P.kwargs) -> Outcome:
        try:
            return await func(*args, **kwargs)
        except Exception as exc:
            LOGGER.warning("%s failed: %s", func.__qualname__, exc)
            return failure(exc)

    return _wrapper
