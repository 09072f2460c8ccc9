"""
Portfolio Tracker - Custom Exceptions
Application-specific exceptions with HTTP error handling
"""
from typing import Optional, Any, Dict
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from loguru import logger


class PortfolioTrackerException(Exception):
    """Base exception for Portfolio Tracker."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str = "An error occurred",
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)


# =========================
# Request Exceptions
# =========================

class ValidationError(PortfolioTrackerException):
    """Invalid input rejected before any I/O."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="VALIDATION_ERROR", details=details)


class NotFoundError(PortfolioTrackerException):
    """Requested resource does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str = "Resource"):
        super().__init__(message=f"{resource} not found", code="NOT_FOUND")


# =========================
# Currency Exceptions
# =========================

class UnsupportedCurrencyPairError(ValidationError):
    """Conversion requested between currencies the system cannot relate."""

    def __init__(self, from_currency: str, to_currency: str):
        super().__init__(
            message=f"Unsupported currency conversion: {from_currency} -> {to_currency}",
            details={"from": from_currency, "to": to_currency},
        )


class ExchangeRateUnavailableError(PortfolioTrackerException):
    """Provider failed and there is no cached rate to fall back on."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Exchange rate unavailable"):
        super().__init__(message=message, code="INTERNAL_ERROR")


class ExchangeRateProviderError(PortfolioTrackerException):
    """
    External rate provider failure (HTTP status, transport, timeout, payload).

    Never reaches API clients: the exchange rate cache converts it into
    either a stale result or ExchangeRateUnavailableError.
    """

    def __init__(self, provider: str = "", message: str = "Provider error"):
        super().__init__(
            message=f"{provider}: {message}" if provider else message,
            code="PROVIDER_ERROR"
        )


# =========================
# HTTP Exception Handlers
# =========================

async def portfolio_tracker_exception_handler(
    request: Request,
    exc: PortfolioTrackerException,
) -> JSONResponse:
    """Render application exceptions as {"error", "message"} JSON bodies."""
    if exc.status_code >= 500:
        logger.error(f"[{exc.code}] {request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(f"[{exc.code}] {request.method} {request.url.path}: {exc.message}")

    body: Dict[str, Any] = {"error": exc.code, "message": exc.message}
    if exc.details:
        body["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the application exception handlers to a FastAPI app."""
    app.add_exception_handler(PortfolioTrackerException, portfolio_tracker_exception_handler)
