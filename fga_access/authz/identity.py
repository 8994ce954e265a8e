"""
Authorization identity resolution.

Which store and which authorization model a call targets. The context is
captured once during bootstrap and only ever read afterwards; a per-call
model override supersedes the default for that single call.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthorizationContext:
    """Active store and default authorization model for this process."""

    authorization_model_id: Optional[str] = None
    store_id: Optional[str] = None


def resolve_model_id(context: AuthorizationContext, override: Optional[str] = None) -> str:
    """
    Pick the model id for one call.

    A non-empty ``override`` is returned verbatim. Otherwise the context
    default is used, or ``""`` if there is none; the empty id is passed on
    to the server, which rejects it.
    """
    if override:
        return override
    return context.authorization_model_id or ""
