"""HTTP interface for the pricing engine."""

from api.base import (
    APIError,
    APIMeta,
    APIResponse,
    success_response,
    error_response,
    ErrorCodes,
)
from api.app import create_app, create_app_from_vault
