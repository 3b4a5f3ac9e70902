"""
Test Errors Module

Tests for chain_sdk.errors package.
"""

import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))


def test_error_code():
    """Test ErrorCode enum"""
    from chain_sdk.errors import ErrorCode

    print("Testing ErrorCode...")

    assert ErrorCode.RPC_CONNECTION_FAILED.value == "1001"
    assert ErrorCode.TX_REJECTED.value == "2004"
    assert ErrorCode.INVALID_AMOUNT.value == "3001"
    assert ErrorCode.INVALID_ACCOUNT_LAYOUT.value == "3004"
    assert ErrorCode.SIGNER_FAILED.value == "6002"

    print("  ErrorCode: PASSED")


def test_sdk_error():
    """Test SDKError base class"""
    from chain_sdk.errors import SDKError, ErrorCode

    print("Testing SDKError...")

    error = SDKError(
        message="Test error",
        code=ErrorCode.RPC_CONNECTION_FAILED,
        recoverable=True,
    )

    # __str__ returns "[code] message" format
    assert "[1001] Test error" == str(error)
    assert error.code == ErrorCode.RPC_CONNECTION_FAILED
    assert error.should_retry is True

    print("  SDKError: PASSED")


def test_sdk_error_wrap():
    """Test SDKError.wrap keeps the original message and error"""
    from chain_sdk.errors import SDKError, RpcError, ErrorCode

    print("Testing SDKError.wrap...")

    cause = RpcError("node unavailable")
    wrapped = SDKError.wrap("Failed to create token transaction", cause)

    assert wrapped.message == "Failed to create token transaction: node unavailable"
    assert wrapped.code == ErrorCode.BUILD_FAILED
    assert wrapped.original_error is cause

    plain = SDKError.wrap("Failed to create swap transaction", KeyError("pool"))
    assert plain.message.startswith("Failed to create swap transaction: ")

    print("  SDKError.wrap: PASSED")


def test_validation_error():
    """Test ValidationError factories"""
    from chain_sdk.errors import ValidationError, SDKError, ErrorCode

    print("Testing ValidationError...")

    error = ValidationError.non_positive("amount_sol", -0.1)
    assert isinstance(error, SDKError)
    assert error.code == ErrorCode.INVALID_AMOUNT
    assert error.field == "amount_sol"
    assert "-0.1" in error.message
    assert error.recoverable is False

    error = ValidationError.invalid_address("to_pubkey", "not-a-key", "bad base58")
    assert error.code == ErrorCode.INVALID_ADDRESS
    assert "bad base58" in error.message

    error = ValidationError.account_count(12, 11)
    assert error.code == ErrorCode.INVALID_ACCOUNT_LAYOUT
    assert error.message == "Invalid account count. Expected 12, got 11"

    print("  ValidationError: PASSED")


def test_rpc_error():
    """Test RpcError exception"""
    from chain_sdk.errors import RpcError, ErrorCode

    print("Testing RpcError...")

    error1 = RpcError.connection_failed("https://rpc.example.com")
    assert error1.code == ErrorCode.RPC_CONNECTION_FAILED
    assert error1.recoverable is True
    assert error1.endpoint == "https://rpc.example.com"

    error2 = RpcError.timeout("https://rpc.example.com", 30.0)
    assert error2.code == ErrorCode.RPC_TIMEOUT
    assert "30.0" in error2.message

    error3 = RpcError.rate_limited("https://rpc.example.com")
    assert error3.code == ErrorCode.RPC_RATE_LIMITED

    print("  RpcError: PASSED")


def test_signing_error():
    """Test SigningError factories"""
    from chain_sdk.errors import SigningError, ErrorCode

    print("Testing SigningError...")

    assert SigningError.not_configured().code == ErrorCode.SIGNER_NOT_CONFIGURED

    cause = RuntimeError("User rejected the request")
    error = SigningError.failed("wallet signing error", cause)
    assert error.code == ErrorCode.SIGNER_FAILED
    assert error.original_error is cause

    error = SigningError.missing_signatures(["Abc", "Def"])
    assert error.code == ErrorCode.SIGNER_MISSING_SIGNATURE
    assert "Abc, Def" in error.message

    print("  SigningError: PASSED")


def test_transaction_error():
    """Test TransactionError factories"""
    from chain_sdk.errors import TransactionError, ErrorCode

    print("Testing TransactionError...")

    error = TransactionError.rejected("5sig", {"InstructionError": [0, "Custom"]})
    assert error.code == ErrorCode.TX_REJECTED
    assert error.signature == "5sig"
    assert error.details["signature"] == "5sig"

    assert TransactionError.send_failed("connection reset").recoverable is True
    assert TransactionError.send_failed("Blockhash not found").recoverable is False
    assert TransactionError.missing_blockhash().code == ErrorCode.TX_INVALID_BLOCKHASH

    print("  TransactionError: PASSED")


def test_error_inheritance():
    """Test every error derives from SDKError"""
    from chain_sdk.errors import (
        SDKError,
        ValidationError,
        RpcError,
        SigningError,
        TransactionError,
        ConfigurationError,
    )

    print("Testing error inheritance...")

    for cls in (ValidationError, RpcError, SigningError, TransactionError, ConfigurationError):
        assert issubclass(cls, SDKError)
        assert issubclass(cls, Exception)

    print("  Error inheritance: PASSED")


def main():
    """Run all error tests"""
    print("=" * 60)
    print("Chain SDK Errors Tests")
    print("=" * 60)

    tests = [
        test_error_code,
        test_sdk_error,
        test_sdk_error_wrap,
        test_validation_error,
        test_rpc_error,
        test_signing_error,
        test_transaction_error,
        test_error_inheritance,
    ]

    passed = 0
    failed = 0

    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"  FAILED: {e}")
            failed += 1

    print("=" * 60)
    print(f"Results: {passed} passed, {failed} failed")
    print("=" * 60)

    return failed == 0


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
