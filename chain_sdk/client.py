"""
ChainSDK - Unified entry point for transaction building, signing and submission

Wires one BlockchainConfig and one RpcClient into the builder, signing and
submission functions.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import List, Optional, Sequence, Union

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from . import builders
from .constants import (
    GORBCHAIN_CONFIG,
    SOLANA_DEVNET_CONFIG,
    SOLANA_MAINNET_CONFIG,
)
from .errors import ConfigurationError, ErrorCode, SigningError
from .infra import signing, submission
from .infra.rpc import RpcClient, RpcClientConfig
from .infra.solana_signer import (
    LocalSigner,
    RemoteSigner,
    Wallet,
    validate_keypair,
    validate_wallet,
)
from .types import (
    AddLiquidityParams,
    AddLiquidityTransactionResult,
    BlockchainConfig,
    ConfirmationResult,
    CreateNFTParams,
    CreatePoolParams,
    CreateTokenParams,
    EnsureTokenAccountsParams,
    EnsureTokenAccountsResult,
    PoolTransactionResult,
    SimulationResult,
    SubmitOptions,
    SubmitResult,
    SwapParams,
    SwapTransactionResult,
    TokenTransactionResult,
    TokenTransferParams,
    TokenTransferTransactionResult,
    TransactionDetails,
    TransferSOLParams,
    TransferTransactionResult,
    UnsignedTransaction,
)

logger = logging.getLogger(__name__)

KeypairLike = Union[Keypair, LocalSigner]
WalletLike = Union[Wallet, RemoteSigner]

SOLANA_TESTNET_RPC = "https://api.testnet.solana.com"


def _check_keypair(keypair: KeypairLike, role: str = "keypair"):
    if isinstance(keypair, LocalSigner):
        return
    if not validate_keypair(keypair):
        raise SigningError(f"Invalid {role} provided", ErrorCode.INVALID_SIGNER)


def _check_wallet(wallet: WalletLike):
    if isinstance(wallet, RemoteSigner):
        return
    if not validate_wallet(wallet):
        raise SigningError("Invalid wallet provided", ErrorCode.INVALID_SIGNER)


class ChainSDK:
    """
    Unified SDK client for one Solana-compatible chain

    Usage:
        sdk = create_gorbchain_sdk()

        built = await sdk.create_token_transaction(
            CreateTokenParams(name="Demo", symbol="DMO", uri="https://...",
                              supply=1_000_000, decimals=6),
            payer=keypair.pubkey(),
        )
        signed = await sdk.sign_with_keypair(built.transaction, keypair)
        result = await sdk.submit_transaction(signed)

        async with create_solana_sdk("devnet") as sdk:
            ...
    """

    def __init__(
        self,
        chain: BlockchainConfig,
        rpc: Optional[RpcClient] = None,
        rpc_config: Optional[RpcClientConfig] = None,
    ):
        """
        Initialize ChainSDK

        Args:
            chain: Chain configuration shared by every call
            rpc: Existing RPC client (created from chain.rpc_url if None)
            rpc_config: RPC configuration for the created client
        """
        self._chain = chain
        if rpc is None:
            rpc_config = rpc_config or RpcClientConfig(commitment=chain.commitment)
            rpc = RpcClient(chain.rpc_url, config=rpc_config)
        self._rpc = rpc

    @property
    def chain(self) -> BlockchainConfig:
        """Chain configuration"""
        return self._chain

    @property
    def rpc(self) -> RpcClient:
        """Access to RPC client"""
        return self._rpc

    def explorer_url(self, signature: str) -> Optional[str]:
        """Explorer link for a signature, if the chain has an explorer"""
        return self._chain.transaction_url(signature)

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    async def create_token_transaction(
        self,
        params: CreateTokenParams,
        payer: Pubkey,
    ) -> TokenTransactionResult:
        return await builders.create_token_transaction(self._rpc, self._chain, params, payer)

    async def create_nft_transaction(
        self,
        params: CreateNFTParams,
        payer: Pubkey,
    ) -> TokenTransactionResult:
        return await builders.create_nft_transaction(self._rpc, self._chain, params, payer)

    def create_native_transfer_transaction(self, params: TransferSOLParams) -> TransferTransactionResult:
        return builders.create_native_transfer_transaction(self._chain, params)

    def create_token_transfer_transaction(
        self,
        params: TokenTransferParams,
    ) -> TokenTransferTransactionResult:
        return builders.create_token_transfer_transaction(self._chain, params)

    async def ensure_token_accounts_exist(
        self,
        params: EnsureTokenAccountsParams,
    ) -> EnsureTokenAccountsResult:
        return await builders.ensure_token_accounts_exist(self._rpc, self._chain, params)

    def create_swap_transaction(self, params: SwapParams) -> SwapTransactionResult:
        return builders.create_swap_transaction(self._chain, params)

    def create_pool_transaction(self, params: CreatePoolParams) -> PoolTransactionResult:
        return builders.create_pool_transaction(self._chain, params)

    def create_add_liquidity_transaction(
        self,
        params: AddLiquidityParams,
    ) -> AddLiquidityTransactionResult:
        return builders.create_add_liquidity_transaction(self._chain, params)

    # ------------------------------------------------------------------
    # Signing
    # ------------------------------------------------------------------

    async def sign_with_keypair(
        self,
        transaction: UnsignedTransaction,
        keypair: KeypairLike,
    ) -> Transaction:
        _check_keypair(keypair)
        return await signing.sign_with_keypair(self._rpc, transaction, keypair)

    async def sign_with_dual_keypairs(
        self,
        transaction: UnsignedTransaction,
        sender: KeypairLike,
        fee_payer: Optional[KeypairLike] = None,
    ) -> Transaction:
        _check_keypair(sender, "sender keypair")
        if fee_payer is not None:
            _check_keypair(fee_payer, "fee payer keypair")
        return await signing.sign_with_dual_keypairs(self._rpc, transaction, sender, fee_payer)

    async def sign_with_wallet(
        self,
        transaction: UnsignedTransaction,
        wallet: WalletLike,
    ) -> Transaction:
        _check_wallet(wallet)
        return await signing.sign_with_wallet(self._rpc, transaction, wallet)

    async def sign_all_with_wallet(
        self,
        transactions: Sequence[UnsignedTransaction],
        wallet: WalletLike,
    ) -> List[Transaction]:
        _check_wallet(wallet)
        return await signing.sign_all_with_wallet(self._rpc, transactions, wallet)

    async def sign_with_wallet_and_keypair(
        self,
        transaction: UnsignedTransaction,
        wallet: WalletLike,
        keypair: Optional[KeypairLike] = None,
    ) -> Transaction:
        _check_wallet(wallet)
        if keypair is not None:
            _check_keypair(keypair)
        return await signing.sign_with_wallet_and_keypair(self._rpc, transaction, wallet, keypair)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit_transaction(
        self,
        transaction: Transaction,
        options: Optional[SubmitOptions] = None,
    ) -> SubmitResult:
        return await submission.submit_transaction(
            self._rpc, transaction, options, explorer_url=self._chain.explorer_url
        )

    async def submit_transactions(
        self,
        transactions: Sequence[Transaction],
        options: Optional[SubmitOptions] = None,
    ) -> List[SubmitResult]:
        return await submission.submit_transactions(
            self._rpc, transactions, options, explorer_url=self._chain.explorer_url
        )

    async def simulate_transaction(
        self,
        transaction: Union[Transaction, UnsignedTransaction],
    ) -> SimulationResult:
        return await submission.simulate_transaction(self._rpc, transaction)

    async def wait_for_confirmation(
        self,
        signature: str,
        commitment: Optional[str] = None,
        timeout_ms: int = submission.DEFAULT_CONFIRMATION_TIMEOUT_MS,
    ) -> ConfirmationResult:
        return await submission.wait_for_confirmation(
            self._rpc, signature, commitment or self._chain.commitment, timeout_ms
        )

    async def get_transaction_details(self, signature: str) -> TransactionDetails:
        return await submission.get_transaction_details(self._rpc, signature)

    async def close(self):
        """Close client connections and release resources"""
        await self._rpc.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return f"ChainSDK(chain={self._chain.name}, endpoint={self._rpc.endpoint})"


def create_sdk(
    chain: BlockchainConfig,
    rpc: Optional[RpcClient] = None,
    rpc_config: Optional[RpcClientConfig] = None,
) -> ChainSDK:
    """Create an SDK for any chain configuration"""
    return ChainSDK(chain, rpc=rpc, rpc_config=rpc_config)


def create_gorbchain_sdk(rpc_url: Optional[str] = None) -> ChainSDK:
    """Create an SDK for Gorbchain, optionally on a custom RPC endpoint"""
    chain = GORBCHAIN_CONFIG
    if rpc_url:
        chain = dataclasses.replace(chain, rpc_url=rpc_url)
    return ChainSDK(chain)


def create_solana_sdk(
    cluster: str = "mainnet-beta",
    rpc_url: Optional[str] = None,
) -> ChainSDK:
    """
    Create an SDK for a Solana cluster

    Args:
        cluster: "mainnet-beta", "devnet" or "testnet"
        rpc_url: Optional custom RPC endpoint for that cluster

    Raises:
        ConfigurationError: Unknown cluster
    """
    if cluster == "mainnet-beta":
        chain = SOLANA_MAINNET_CONFIG
    elif cluster == "devnet":
        chain = SOLANA_DEVNET_CONFIG
    elif cluster == "testnet":
        chain = dataclasses.replace(
            SOLANA_MAINNET_CONFIG,
            cluster="testnet",
            rpc_url=SOLANA_TESTNET_RPC,
            explorer_url="https://explorer.solana.com/tx/{signature}?cluster=testnet",
        )
    else:
        raise ConfigurationError.invalid(
            "cluster", f"{cluster!r} not in ('mainnet-beta', 'devnet', 'testnet')"
        )

    if rpc_url:
        chain = dataclasses.replace(chain, rpc_url=rpc_url)
    logger.debug(f"Creating Solana SDK for {cluster} at {chain.rpc_url}")
    return ChainSDK(chain)
