"""
Per-call context handed to every procedure handler.

The context only *carries* the caller identity taken from a request
header; it never verifies it.  Handlers that care about the identity
are responsible for checking it.  A new :class:`Context` is built for
every invocation and never reused.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_IDENTITY_HEADER = "authorization"


@dataclass(frozen=True)
class Context:
    """Immutable metadata derived from the incoming request."""

    identity: Optional[str] = None


def _header_value(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is not None:
        return value
    # Plain dicts are case sensitive, starlette ``Headers`` are not.
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def create_context(
    headers: Optional[Mapping[str, str]] = None,
    *,
    identity_header: str = DEFAULT_IDENTITY_HEADER,
) -> Context:
    """Build a fresh :class:`Context` from request headers.

    A missing or blank header yields ``identity=None``.  The value is
    otherwise passed through as sent, ``Bearer`` prefix included.
    """
    if not headers:
        return Context()
    raw = _header_value(headers, identity_header)
    if raw is None or not raw.strip():
        return Context()
    return Context(identity=raw.strip())
