"""Shared error handling utilities for API routers."""

from __future__ import annotations

import math
from typing import Awaitable, TypeVar

from fastapi import HTTPException

from stocksense.core.errors import (
    AnalysisInterruptedError,
    ConfigurationError,
    QuoteUnavailableError,
    RateLimitedError,
    ValidationError,
)

T = TypeVar("T")


async def call_service(awaitable: Awaitable[T]) -> T:
    """Await a service call, mapping domain exceptions to HTTPException.

    The ``detail`` carries a machine-readable ``code`` so clients can render a
    setup prompt for configuration errors and a retry affordance otherwise.
    """
    try:
        return await awaitable
    except ConfigurationError as exc:
        raise HTTPException(status_code=503, detail=_detail("setup_required", exc)) from exc
    except RateLimitedError as exc:
        headers = None
        if exc.retry_after:
            headers = {"Retry-After": str(math.ceil(exc.retry_after))}
        raise HTTPException(status_code=429, detail=_detail("rate_limited", exc), headers=headers) from exc
    except AnalysisInterruptedError as exc:
        raise HTTPException(status_code=502, detail=_detail("analysis_interrupted", exc)) from exc
    except QuoteUnavailableError as exc:
        raise HTTPException(status_code=404, detail=_detail("quote_unavailable", exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=_detail("validation_error", exc)) from exc


def _detail(code: str, exc: Exception) -> dict:
    return {"code": code, "message": str(exc)}


def raise_not_found(detail: str) -> None:
    raise HTTPException(status_code=404, detail=detail)
