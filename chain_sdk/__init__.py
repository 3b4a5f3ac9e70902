"""
Chain SDK - transaction building, signing and submission for
Solana-compatible chains (Solana, Gorbchain)

Provides:
- Token-2022 token and NFT creation with on-mint metadata
- Native and token transfers
- AMM swap, pool creation and add liquidity
- Keypair and wallet signing with a fresh blockhash
- Submission, confirmation polling and simulation
"""

__version__ = "0.1.0"

from .client import ChainSDK, create_sdk, create_gorbchain_sdk, create_solana_sdk
from .constants import (
    GORBCHAIN_CONFIG,
    SOLANA_MAINNET_CONFIG,
    SOLANA_DEVNET_CONFIG,
    DEFAULT_CONFIGS,
    NATIVE_MINT,
    create_blockchain_config,
    get_blockchain_config,
)
from .types import (
    AmmProgramConfig,
    BlockchainConfig,
    TokenInfo,
    Pool,
    UnsignedTransaction,
    CreateTokenParams,
    CreateNFTParams,
    TransferSOLParams,
    TokenTransferParams,
    EnsureTokenAccountsParams,
    SwapParams,
    CreatePoolParams,
    AddLiquidityParams,
    SubmitOptions,
    SubmitResult,
    SimulationResult,
    ConfirmationResult,
)
from .errors import (
    ErrorCode,
    SDKError,
    ValidationError,
    RpcError,
    SigningError,
    TransactionError,
    ConfigurationError,
)
from .infra import (
    RpcClient,
    RpcClientConfig,
    LocalSigner,
    RemoteSigner,
    create_signer,
    validate_keypair,
    validate_wallet,
)

__all__ = [
    "__version__",
    # Client
    "ChainSDK",
    "create_sdk",
    "create_gorbchain_sdk",
    "create_solana_sdk",
    # Chain configuration
    "GORBCHAIN_CONFIG",
    "SOLANA_MAINNET_CONFIG",
    "SOLANA_DEVNET_CONFIG",
    "DEFAULT_CONFIGS",
    "NATIVE_MINT",
    "create_blockchain_config",
    "get_blockchain_config",
    # Types
    "AmmProgramConfig",
    "BlockchainConfig",
    "TokenInfo",
    "Pool",
    "UnsignedTransaction",
    "CreateTokenParams",
    "CreateNFTParams",
    "TransferSOLParams",
    "TokenTransferParams",
    "EnsureTokenAccountsParams",
    "SwapParams",
    "CreatePoolParams",
    "AddLiquidityParams",
    "SubmitOptions",
    "SubmitResult",
    "SimulationResult",
    "ConfirmationResult",
    # Errors
    "ErrorCode",
    "SDKError",
    "ValidationError",
    "RpcError",
    "SigningError",
    "TransactionError",
    "ConfigurationError",
    # Infrastructure
    "RpcClient",
    "RpcClientConfig",
    "LocalSigner",
    "RemoteSigner",
    "create_signer",
    "validate_keypair",
    "validate_wallet",
]
