"""Caller identity resolution.

Authentication happens upstream: the gateway verifies the session and forwards
the caller's id in ``X-User-Id``. Anything missing or malformed is treated as
an anonymous caller, and each service decides what anonymous means for it.
"""
from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from fastapi import Header

logger = logging.getLogger(__name__)

USER_ID_HEADER = "X-User-Id"


def parse_user_id(raw: Optional[str]) -> Optional[UUID]:
    if not raw:
        return None
    try:
        return UUID(raw.strip())
    except ValueError:
        logger.debug("Ignoring malformed %s header", USER_ID_HEADER)
        return None


def get_current_user_id(x_user_id: Optional[str] = Header(default=None, alias=USER_ID_HEADER)) -> Optional[UUID]:
    """FastAPI dependency returning the caller's id, or None when anonymous."""
    return parse_user_id(x_user_id)
