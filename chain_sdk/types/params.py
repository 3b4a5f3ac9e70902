"""
Builder and submission parameters

Optional fields are resolved at the call site: a missing fee payer means the
sender pays, a missing mint keypair means a fresh one is generated.
"""

from dataclasses import dataclass
from typing import Optional, Union

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from .common import Amount, TokenInfo, Pool


@dataclass
class CreateTokenParams:
    """
    Fungible token creation

    Attributes:
        name: Token name stored in on-mint metadata
        symbol: Token symbol
        uri: Off-chain metadata URI
        supply: Whole tokens to mint to the payer (scaled by decimals)
        decimals: Mint decimals
        freeze_authority: Optional freeze authority (None = no freeze authority)
        mint_keypair: Pre-generated mint keypair (generated if None)
    """
    name: str
    symbol: str
    uri: str
    supply: Union[int, str]
    decimals: Union[int, str]
    freeze_authority: Optional[Pubkey] = None
    mint_keypair: Optional[Keypair] = None


@dataclass
class CreateNFTParams:
    """NFT creation (supply 1, decimals 0)"""
    name: str
    symbol: str
    uri: str
    description: str = ""
    mint_keypair: Optional[Keypair] = None


@dataclass
class TransferSOLParams:
    """Native transfer; fee_payer defaults to from_pubkey"""
    from_pubkey: Pubkey
    to_pubkey: Pubkey
    amount_sol: Amount
    fee_payer: Optional[Pubkey] = None


@dataclass
class TokenTransferParams:
    """Token transfer between associated token accounts; fee_payer defaults to from_pubkey"""
    mint: Pubkey
    from_pubkey: Pubkey
    to_pubkey: Pubkey
    amount: Amount
    decimals: int
    fee_payer: Optional[Pubkey] = None


@dataclass
class EnsureTokenAccountsParams:
    """Accounts whose ATAs must exist before a token transfer"""
    mint: Pubkey
    from_pubkey: Pubkey
    to_pubkey: Pubkey
    fee_payer: Optional[Pubkey] = None


@dataclass
class SwapParams:
    """
    AMM swap

    Attributes:
        from_token_amount: Input amount in UI units
        from_token: Token given
        to_token: Token received
        from_pubkey: User wallet (signer, token owner)
        fee_payer: Fee payer (defaults to from_pubkey)
        slippage_tolerance: Percent, informational only (program enforces none)
    """
    from_token_amount: Amount
    from_token: TokenInfo
    to_token: TokenInfo
    from_pubkey: Pubkey
    fee_payer: Optional[Pubkey] = None
    slippage_tolerance: float = 0.5


@dataclass
class CreatePoolParams:
    """New AMM pool seeded with amount_a / amount_b (UI units)"""
    token_a: TokenInfo
    token_b: TokenInfo
    amount_a: Amount
    amount_b: Amount
    from_pubkey: Pubkey
    fee_payer: Optional[Pubkey] = None


@dataclass
class AddLiquidityParams:
    """Deposit into an existing pool (UI units)"""
    pool: Pool
    amount_a: Amount
    amount_b: Amount
    from_pubkey: Pubkey
    fee_payer: Optional[Pubkey] = None


@dataclass
class SubmitOptions:
    """
    Submission options; unset values come from config.tx / BlockchainConfig

    Attributes:
        skip_preflight: Skip node-side simulation before broadcast
        max_retries: sendTransaction maxRetries (node-side rebroadcast)
        commitment: Commitment level to wait for
        timeout_seconds: Confirmation wait limit
    """
    skip_preflight: Optional[bool] = None
    max_retries: Optional[int] = None
    commitment: Optional[str] = None
    timeout_seconds: Optional[float] = None
