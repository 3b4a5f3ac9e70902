"""
Infrastructure layer - RPC, signing, submission
"""

from .rpc import RpcClient, RpcClientConfig
from .solana_signer import (
    Signer,
    Wallet,
    LocalSigner,
    RemoteSigner,
    create_signer,
    validate_keypair,
    validate_wallet,
)
from .signing import (
    sign_with_keypair,
    sign_with_dual_keypairs,
    sign_with_wallet,
    sign_all_with_wallet,
    sign_with_wallet_and_keypair,
)
from .submission import (
    submit_transaction,
    submit_transactions,
    simulate_transaction,
    wait_for_confirmation,
    get_transaction_details,
)

__all__ = [
    "RpcClient",
    "RpcClientConfig",
    "Signer",
    "Wallet",
    "LocalSigner",
    "RemoteSigner",
    "create_signer",
    "validate_keypair",
    "validate_wallet",
    "sign_with_keypair",
    "sign_with_dual_keypairs",
    "sign_with_wallet",
    "sign_all_with_wallet",
    "sign_with_wallet_and_keypair",
    "submit_transaction",
    "submit_transactions",
    "simulate_transaction",
    "wait_for_confirmation",
    "get_transaction_details",
]
