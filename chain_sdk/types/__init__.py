"""
Type definitions for the chain SDK
"""

from .chain import AmmProgramConfig, BlockchainConfig, COMMITMENT_LEVELS, commitment_rank
from .common import (
    LAMPORTS_PER_SOL,
    SOL_DECIMALS,
    TokenInfo,
    Pool,
    require_positive,
    require_u64,
    sol_to_lamports,
    to_int,
    to_pubkey,
    to_raw_amount,
)
from .transaction import UnsignedTransaction
from .params import (
    CreateTokenParams,
    CreateNFTParams,
    TransferSOLParams,
    TokenTransferParams,
    EnsureTokenAccountsParams,
    SwapParams,
    CreatePoolParams,
    AddLiquidityParams,
    SubmitOptions,
)
from .result import (
    TokenTransactionResult,
    TransferTransactionResult,
    TokenTransferTransactionResult,
    EnsureTokenAccountsResult,
    SwapTransactionResult,
    PoolTransactionResult,
    AddLiquidityTransactionResult,
    SubmitResult,
    SimulationResult,
    ConfirmationResult,
    TransactionDetails,
    CONFIRMATION_TIMEOUT,
)

__all__ = [
    # Chain configuration
    "AmmProgramConfig",
    "BlockchainConfig",
    "COMMITMENT_LEVELS",
    "commitment_rank",
    # Common types
    "LAMPORTS_PER_SOL",
    "SOL_DECIMALS",
    "TokenInfo",
    "Pool",
    "require_positive",
    "require_u64",
    "sol_to_lamports",
    "to_int",
    "to_pubkey",
    "to_raw_amount",
    "UnsignedTransaction",
    # Params
    "CreateTokenParams",
    "CreateNFTParams",
    "TransferSOLParams",
    "TokenTransferParams",
    "EnsureTokenAccountsParams",
    "SwapParams",
    "CreatePoolParams",
    "AddLiquidityParams",
    "SubmitOptions",
    # Results
    "TokenTransactionResult",
    "TransferTransactionResult",
    "TokenTransferTransactionResult",
    "EnsureTokenAccountsResult",
    "SwapTransactionResult",
    "PoolTransactionResult",
    "AddLiquidityTransactionResult",
    "SubmitResult",
    "SimulationResult",
    "ConfirmationResult",
    "TransactionDetails",
    "CONFIRMATION_TIMEOUT",
]
