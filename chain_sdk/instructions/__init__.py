"""
Byte-exact instruction encoders for the system, Token-2022, associated token
and AMM programs
"""

from .system import build_create_account_instruction, build_transfer_instruction
from .token import (
    MINT_WITH_METADATA_POINTER_SIZE,
    metadata_space,
    get_associated_token_address,
    build_initialize_metadata_pointer_instruction,
    build_initialize_mint_instruction,
    build_initialize_token_metadata_instruction,
    build_create_associated_token_account_instruction,
    build_mint_to_instruction,
    build_transfer_checked_instruction,
)
from .amm import (
    SwapAccounts,
    PoolAccounts,
    canonical_pair,
    native_first,
    derive_pool_address,
    derive_vault_address,
    derive_lp_mint_address,
    user_token_account,
    build_swap_instruction,
    build_init_pool_instruction,
    build_add_liquidity_instruction,
)

__all__ = [
    "build_create_account_instruction",
    "build_transfer_instruction",
    "MINT_WITH_METADATA_POINTER_SIZE",
    "metadata_space",
    "get_associated_token_address",
    "build_initialize_metadata_pointer_instruction",
    "build_initialize_mint_instruction",
    "build_initialize_token_metadata_instruction",
    "build_create_associated_token_account_instruction",
    "build_mint_to_instruction",
    "build_transfer_checked_instruction",
    "SwapAccounts",
    "PoolAccounts",
    "canonical_pair",
    "native_first",
    "derive_pool_address",
    "derive_vault_address",
    "derive_lp_mint_address",
    "user_token_account",
    "build_swap_instruction",
    "build_init_pool_instruction",
    "build_add_liquidity_instruction",
]
