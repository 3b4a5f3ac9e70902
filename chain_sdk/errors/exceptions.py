"""
Exception definitions for the chain SDK
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """
    Unified error codes for SDK operations

    1xxx - RPC errors
    2xxx - Transaction errors
    3xxx - Input validation errors
    6xxx - Signing errors
    7xxx - Builder errors
    9xxx - Configuration errors
    """
    # RPC errors (recoverable)
    RPC_CONNECTION_FAILED = "1001"
    RPC_TIMEOUT = "1002"
    RPC_RATE_LIMITED = "1003"
    RPC_INVALID_RESPONSE = "1004"

    # Transaction errors
    TX_SIMULATION_FAILED = "2001"
    TX_SEND_FAILED = "2002"
    TX_CONFIRMATION_FAILED = "2003"
    TX_REJECTED = "2004"
    TX_INVALID_BLOCKHASH = "2005"

    # Validation errors
    INVALID_AMOUNT = "3001"
    INVALID_ADDRESS = "3002"
    INVALID_TOKEN_PAIR = "3003"
    INVALID_ACCOUNT_LAYOUT = "3004"
    INVALID_SIGNER = "3005"

    # Signing errors
    SIGNER_NOT_CONFIGURED = "6001"
    SIGNER_FAILED = "6002"
    SIGNER_MISSING_SIGNATURE = "6003"

    # Builder errors
    BUILD_FAILED = "7001"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


class SDKError(Exception):
    """
    Base exception for all SDK errors

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        recoverable: Whether the error might succeed on retry
        original_error: The underlying exception if any
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.BUILD_FAILED,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"

    @property
    def should_retry(self) -> bool:
        """Indicate if the operation should be retried"""
        return self.recoverable

    @classmethod
    def wrap(cls, context: str, error: Exception) -> "SDKError":
        """Wrap an arbitrary failure, keeping the original message"""
        message = error.message if isinstance(error, SDKError) else str(error)
        return cls(
            f"{context}: {message}",
            ErrorCode.BUILD_FAILED,
            original_error=error,
        )


class ValidationError(SDKError):
    """
    Malformed input rejected before any network call

    Raised when:
    - Amounts are zero or negative
    - Addresses are empty or not valid base58 public keys
    - A token pair is not allowed (native asset on both sides)
    - An assembled account list does not match the program layout
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_AMOUNT,
        field: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            details={"field": field} if field else None,
        )
        self.field = field

    @classmethod
    def non_positive(cls, field: str, value) -> "ValidationError":
        return cls(
            f"Invalid {field}: {value}. Amount must be greater than 0",
            ErrorCode.INVALID_AMOUNT,
            field=field,
        )

    @classmethod
    def invalid_address(cls, field: str, value, reason: str = "") -> "ValidationError":
        suffix = f" ({reason})" if reason else ""
        return cls(
            f"Invalid address for {field}: {value!r}{suffix}",
            ErrorCode.INVALID_ADDRESS,
            field=field,
        )

    @classmethod
    def account_count(cls, expected: int, actual: int) -> "ValidationError":
        return cls(
            f"Invalid account count. Expected {expected}, got {actual}",
            ErrorCode.INVALID_ACCOUNT_LAYOUT,
        )


class RpcError(SDKError):
    """
    RPC-related errors - typically recoverable

    Raised when:
    - Connection to RPC endpoint fails
    - Request times out
    - Rate limit is hit
    - The node answers with a JSON-RPC error
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RPC_CONNECTION_FAILED,
        original_error: Optional[Exception] = None,
        endpoint: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=True,
            original_error=original_error,
            details={"endpoint": endpoint} if endpoint else None,
        )
        self.endpoint = endpoint

    @classmethod
    def connection_failed(cls, endpoint: str, error: Exception = None) -> "RpcError":
        return cls(
            f"Failed to connect to RPC endpoint: {endpoint}",
            ErrorCode.RPC_CONNECTION_FAILED,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def timeout(cls, endpoint: str, timeout_seconds: float) -> "RpcError":
        return cls(
            f"RPC request timed out after {timeout_seconds}s",
            ErrorCode.RPC_TIMEOUT,
            endpoint=endpoint,
        )

    @classmethod
    def rate_limited(cls, endpoint: str) -> "RpcError":
        return cls(
            "RPC rate limit exceeded",
            ErrorCode.RPC_RATE_LIMITED,
            endpoint=endpoint,
        )


class SigningError(SDKError):
    """
    Signing-related errors

    Raised when:
    - No signer configured
    - A keypair or wallet is structurally invalid
    - The wallet rejects or fails the signing request
    - A required signature is still missing after signing
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SIGNER_FAILED,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, code, recoverable=False, original_error=original_error)

    @classmethod
    def not_configured(cls) -> "SigningError":
        return cls(
            "No signer configured. Provide a keypair or keypair file path.",
            ErrorCode.SIGNER_NOT_CONFIGURED,
        )

    @classmethod
    def failed(cls, reason: str, error: Optional[Exception] = None) -> "SigningError":
        return cls(f"Signing failed: {reason}", ErrorCode.SIGNER_FAILED, original_error=error)

    @classmethod
    def missing_signatures(cls, signers: list) -> "SigningError":
        return cls(
            f"Missing signatures for required signers: {', '.join(signers)}",
            ErrorCode.SIGNER_MISSING_SIGNATURE,
        )


class TransactionError(SDKError):
    """
    Transaction execution errors

    Raised when:
    - The chain rejects a transaction
    - Transaction send fails
    - Confirmation reports an on-chain error
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TX_SEND_FAILED,
        signature: Optional[str] = None,
        logs: Optional[list] = None,
        recoverable: bool = False,
    ):
        super().__init__(
            message,
            code,
            recoverable=recoverable,
            details={"signature": signature, "logs": logs},
        )
        self.signature = signature
        self.logs = logs or []

    @classmethod
    def rejected(cls, signature: str, error) -> "TransactionError":
        return cls(
            f"Transaction failed: {error}",
            ErrorCode.TX_REJECTED,
            signature=signature,
        )

    @classmethod
    def send_failed(cls, error: str) -> "TransactionError":
        # Network failures are worth a caller-side retry
        recoverable = "timeout" in error.lower() or "connection" in error.lower()
        return cls(
            f"Failed to send transaction: {error}",
            ErrorCode.TX_SEND_FAILED,
            recoverable=recoverable,
        )

    @classmethod
    def missing_blockhash(cls) -> "TransactionError":
        return cls(
            "Transaction has no recent blockhash; sign it before serializing",
            ErrorCode.TX_INVALID_BLOCKHASH,
        )


class ConfigurationError(SDKError):
    """
    Configuration-related errors

    Raised when:
    - Required configuration is missing
    - Configuration values are invalid
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ):
        super().__init__(message, code, recoverable=False)

    @classmethod
    def missing(cls, param: str) -> "ConfigurationError":
        return cls(f"Missing required configuration: {param}", ErrorCode.CONFIG_MISSING)

    @classmethod
    def invalid(cls, param: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration '{param}': {reason}", ErrorCode.CONFIG_INVALID)
