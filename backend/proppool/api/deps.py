from __future__ import annotations

import hmac
from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache

from fastapi import Header, HTTPException, Query, Request

from proppool.config import get_settings
from proppool.domain.errors import (
    CatalogError,
    ContestError,
    InvalidPickError,
    InvalidResultError,
    NotFoundError,
    PicksLockedError,
    SeedBlockedError,
    UnknownPlayerNameError,
)
from proppool.services.rate_limit import JoinRateLimiter

_STATUS_BY_ERROR: tuple[tuple[type[Exception], int], ...] = (
    (NotFoundError, 404),
    (PicksLockedError, 403),
    (SeedBlockedError, 409),
    (UnknownPlayerNameError, 400),
    (InvalidPickError, 400),
    (InvalidResultError, 400),
    (CatalogError, 422),
)


@contextmanager
def contest_errors() -> Iterator[None]:
    """Translate service errors into HTTP responses."""
    try:
        yield
    except (ContestError, CatalogError) as exc:
        for error_type, status_code in _STATUS_BY_ERROR:
            if isinstance(exc, error_type):
                detail: object = str(exc)
                if isinstance(exc, SeedBlockedError):
                    detail = {"error": str(exc), "picks_count": exc.picks_count}
                raise HTTPException(status_code=status_code, detail=detail) from exc
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def is_admin_key(candidate: str | None) -> bool:
    secret = get_settings().admin_secret
    if not secret or not candidate:
        return False
    return hmac.compare_digest(candidate, secret)


def require_admin(
    x_admin_key: str | None = Header(None),
    key: str | None = Query(None),
) -> None:
    if not is_admin_key(x_admin_key or key):
        raise HTTPException(status_code=401, detail="Unauthorized")


@lru_cache
def get_join_limiter() -> JoinRateLimiter:
    settings = get_settings()
    return JoinRateLimiter(
        max_attempts=settings.join_rate_limit_max,
        window_seconds=settings.join_rate_limit_window_sec,
    )


def client_key(request: Request, trust_proxy_headers: bool = False) -> str:
    """Rate-limit key for a request.

    Forwarding headers are client-controlled unless a reverse proxy overwrites
    them, so they are only read when ``TRUST_PROXY_HEADERS`` is enabled.
    """
    if trust_proxy_headers:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip.strip()
    return request.client.host if request.client is not None else "unknown"
