"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from backoffice.config import settings
from backoffice.domain.fees import default_fee_configuration
from backoffice.domain.models import FeeConfiguration


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_fee_configuration() -> FeeConfiguration:
    """Provide the active fee configuration in the base currency"""
    return default_fee_configuration(settings.base_currency)
