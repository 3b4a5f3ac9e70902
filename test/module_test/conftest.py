"""
Shared configuration and fixtures for module integration tests.

WARNING: These tests execute real transactions and spend real tokens!

Environment Variables:
    CHAIN_RPC_URL: RPC endpoint URL (required)
    CHAIN_PRIVATE_KEY: Base58 encoded private key (required if no keypair path)
    CHAIN_KEYPAIR_PATH: Path to keypair JSON file (alternative to private key)
    CHAIN_NAME: Preset to run against: gorbchain, solana, solana-devnet (default: gorbchain)
"""

import dataclasses
import os
import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

# Load .env file
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


def get_env_or_fail(key: str) -> str:
    """Get required environment variable or raise error"""
    value = os.getenv(key)
    if not value:
        raise EnvironmentError(
            f"Missing required environment variable: {key}\n"
            f"Please set {key} in your .env file or environment."
        )
    return value


def get_rpc_url() -> str:
    """Get RPC URL from environment"""
    return get_env_or_fail("CHAIN_RPC_URL")


def get_signer():
    """
    Get LocalSigner from environment.

    Tries in order:
    1. CHAIN_PRIVATE_KEY - base58 encoded private key
    2. CHAIN_KEYPAIR_PATH - path to keypair JSON file
    """
    from chain_sdk.infra import LocalSigner

    private_key = os.getenv("CHAIN_PRIVATE_KEY")
    if private_key:
        return LocalSigner.from_base58(private_key)

    keypair_path = os.getenv("CHAIN_KEYPAIR_PATH")
    if keypair_path:
        if not Path(keypair_path).expanduser().exists():
            raise FileNotFoundError(f"Keypair file not found: {keypair_path}")
        return LocalSigner.from_file(keypair_path)

    raise EnvironmentError(
        "No wallet configured. Set either:\n"
        "  CHAIN_PRIVATE_KEY - base58 encoded private key\n"
        "  CHAIN_KEYPAIR_PATH - path to keypair JSON file"
    )


def create_sdk():
    """Create ChainSDK against the configured chain and RPC"""
    from chain_sdk import ChainSDK, get_blockchain_config

    chain = get_blockchain_config(os.getenv("CHAIN_NAME", "gorbchain"))
    chain = dataclasses.replace(chain, rpc_url=get_rpc_url())
    return ChainSDK(chain)


def skip_if_no_config():
    """Check if required config is available, return skip message if not"""
    try:
        get_rpc_url()
        get_signer()
        return None
    except (EnvironmentError, FileNotFoundError) as e:
        return str(e)


# Pytest fixtures
@pytest.fixture(scope="module")
def signer():
    skip_msg = skip_if_no_config()
    if skip_msg:
        pytest.skip(skip_msg)
    return get_signer()


@pytest.fixture
def sdk():
    """Fresh ChainSDK per test (each test runs its own event loop)"""
    skip_msg = skip_if_no_config()
    if skip_msg:
        pytest.skip(skip_msg)
    return create_sdk()
