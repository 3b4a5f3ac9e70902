"""
Error definitions for the chain SDK
"""

from .exceptions import (
    ErrorCode,
    SDKError,
    ValidationError,
    RpcError,
    SigningError,
    TransactionError,
    ConfigurationError,
)

__all__ = [
    "ErrorCode",
    "SDKError",
    "ValidationError",
    "RpcError",
    "SigningError",
    "TransactionError",
    "ConfigurationError",
]
