"""
Result type definitions for builders, submission and confirmation
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from .common import TokenInfo
from .transaction import UnsignedTransaction


# ---------------------------------------------------------------------------
# Builder results
# ---------------------------------------------------------------------------

@dataclass
class TokenTransactionResult:
    """
    Token or NFT creation transaction

    The mint keypair is also attached to transaction.extra_signers; it is
    returned here so callers can persist it or sign elsewhere.
    """
    transaction: UnsignedTransaction
    mint_keypair: Keypair
    mint_address: Pubkey
    associated_token_address: Pubkey
    metadata_space: int = 0

    @property
    def instructions(self) -> List[Instruction]:
        return self.transaction.instructions


@dataclass
class TransferTransactionResult:
    """Native transfer transaction"""
    transaction: UnsignedTransaction
    from_pubkey: Pubkey
    to_pubkey: Pubkey
    amount_lamports: int
    fee_payer: Pubkey

    @property
    def instructions(self) -> List[Instruction]:
        return self.transaction.instructions


@dataclass
class TokenTransferTransactionResult:
    """Token transfer transaction"""
    transaction: UnsignedTransaction
    mint: Pubkey
    from_pubkey: Pubkey
    to_pubkey: Pubkey
    amount_raw: int
    from_token_account: Pubkey
    to_token_account: Pubkey
    fee_payer: Pubkey


@dataclass
class EnsureTokenAccountsResult:
    """
    ATA existence check

    transaction is None when both accounts already exist.
    """
    from_token_account: Pubkey
    to_token_account: Pubkey
    from_account_exists: bool
    to_account_exists: bool
    created_accounts: List[Pubkey] = field(default_factory=list)
    transaction: Optional[UnsignedTransaction] = None


@dataclass
class SwapTransactionResult:
    """AMM swap transaction with every derived address"""
    transaction: UnsignedTransaction
    from_token: TokenInfo
    to_token: TokenInfo
    from_token_amount: Any
    amount_in_raw: int
    from_pubkey: Pubkey
    fee_payer: Pubkey
    pool: Pubkey
    token_a: Pubkey
    token_b: Pubkey
    vault_a: Pubkey
    vault_b: Pubkey
    user_from_account: Pubkey
    user_to_account: Pubkey
    direction_a_to_b: bool
    is_native_swap: bool

    @property
    def instructions(self) -> List[Instruction]:
        return self.transaction.instructions


@dataclass
class PoolTransactionResult:
    """Pool creation transaction"""
    transaction: UnsignedTransaction
    pool: Pubkey
    token_a: Pubkey
    token_b: Pubkey
    lp_mint: Pubkey
    vault_a: Pubkey
    vault_b: Pubkey
    is_native_pool: bool
    amount_a_raw: int
    amount_b_raw: int

    def pool_info(self) -> Dict[str, str]:
        return {
            "pool": str(self.pool),
            "token_a": str(self.token_a),
            "token_b": str(self.token_b),
            "lp_mint": str(self.lp_mint),
            "vault_a": str(self.vault_a),
            "vault_b": str(self.vault_b),
        }


@dataclass
class AddLiquidityTransactionResult(PoolTransactionResult):
    """Add-liquidity transaction; adds the user's token accounts"""
    user_token_a: Optional[Pubkey] = None
    user_token_b: Optional[Pubkey] = None
    user_lp: Optional[Pubkey] = None


# ---------------------------------------------------------------------------
# Submission results
# ---------------------------------------------------------------------------

@dataclass
class SubmitResult:
    """
    Outcome of sending one transaction

    Attributes:
        success: True once the requested commitment was reached without error
        signature: Transaction signature ("" if the send itself failed)
        error: Failure reason
        explorer_url: Link to the transaction when the chain has an explorer
    """
    success: bool
    signature: str = ""
    error: Optional[str] = None
    explorer_url: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, signature: str, **kwargs) -> "SubmitResult":
        return cls(success=True, signature=signature, **kwargs)

    @classmethod
    def failed(cls, error: str, signature: str = "", **kwargs) -> "SubmitResult":
        return cls(success=False, signature=signature, error=error, **kwargs)

    def __str__(self) -> str:
        if self.success:
            return f"SubmitResult(SUCCESS, {self.signature[:16]}...)"
        return f"SubmitResult(FAILED, error={self.error})"


@dataclass
class SimulationResult:
    """Dry-run outcome"""
    success: bool
    logs: List[str] = field(default_factory=list)
    units_consumed: Optional[int] = None
    error: Optional[Any] = None

    @property
    def is_success(self) -> bool:
        return self.success


@dataclass
class ConfirmationResult:
    """
    Outcome of waiting for a signature

    status is the last signature status seen (None if the node never saw it).
    """
    success: bool
    error: Optional[Any] = None
    status: Optional[Dict[str, Any]] = None

    @property
    def is_success(self) -> bool:
        return self.success

    @property
    def is_timeout(self) -> bool:
        return not self.success and self.error == CONFIRMATION_TIMEOUT


CONFIRMATION_TIMEOUT = "Transaction confirmation timeout"


@dataclass
class TransactionDetails:
    """getTransaction lookup"""
    success: bool
    transaction: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
