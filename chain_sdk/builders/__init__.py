"""
Transaction builders

Each builder returns an unsigned transaction; signing fetches the blockhash.
"""

from .token import create_token_transaction, create_nft_transaction
from .transfer import (
    create_native_transfer_transaction,
    create_token_transfer_transaction,
    ensure_token_accounts_exist,
)
from .swap import create_swap_transaction
from .liquidity import create_pool_transaction, create_add_liquidity_transaction

__all__ = [
    "create_token_transaction",
    "create_nft_transaction",
    "create_native_transfer_transaction",
    "create_token_transfer_transaction",
    "ensure_token_accounts_exist",
    "create_swap_transaction",
    "create_pool_transaction",
    "create_add_liquidity_transaction",
]
