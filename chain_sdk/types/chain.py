"""
Chain configuration types

BlockchainConfig is built once at startup and handed to every builder.
Nothing in the SDK looks these values up globally.
"""

from dataclasses import dataclass, field
from typing import Optional

from solders.pubkey import Pubkey

from ..errors import ConfigurationError

COMMITMENT_LEVELS = ("processed", "confirmed", "finalized")


def commitment_rank(commitment: Optional[str]) -> int:
    """Order commitment levels: processed < confirmed < finalized (-1 if unknown)"""
    try:
        return COMMITMENT_LEVELS.index(commitment)
    except ValueError:
        return -1


@dataclass(frozen=True)
class AmmProgramConfig:
    """
    ABI of the constant-product AMM program used by swap/pool builders

    The defaults are the values shipped for the Gorbchain AMM deployment.
    Point these at the real program's ABI when targeting another deployment.

    Attributes:
        program_id: AMM program address
        init_pool_discriminator: Leading byte of the InitPool payload
        add_liquidity_discriminator: Leading byte of the AddLiquidity payload
        swap_discriminator: Leading byte of the Swap payload
        pool_seed: PDA seed for pools ([seed, mint_a, mint_b])
        vault_seed: PDA seed for token vaults ([seed, pool, mint])
        native_vault_seed: Vault seed used when the pool holds the native asset
        lp_mint_seed: PDA seed for the LP mint ([seed, pool])
        native_lp_mint_seed: LP mint seed used when the pool holds the native asset
        swap_account_count: Exact number of accounts the Swap instruction takes
    """
    program_id: Pubkey
    init_pool_discriminator: int = 0
    add_liquidity_discriminator: int = 1
    swap_discriminator: int = 3
    pool_seed: bytes = b"pool"
    vault_seed: bytes = b"vault"
    native_vault_seed: bytes = b"native_sol_vault"
    lp_mint_seed: bytes = b"mint"
    native_lp_mint_seed: bytes = b"native_sol_lp_mint"
    swap_account_count: int = 12


@dataclass(frozen=True)
class BlockchainConfig:
    """
    Program addresses and endpoints for one Solana-compatible chain

    Attributes:
        name: Chain name ("gorbchain", "solana", "custom", ...)
        token_program: Token-2022 compatible token program
        associated_token_program: Associated token account program
        system_program: System program
        rpc_url: JSON-RPC endpoint
        amm: AMM program ABI (swap, pool creation, add liquidity)
        ws_url: Optional websocket endpoint
        commitment: Default commitment level
        native_mint: Mint address that stands for the native asset in pools
        rent_sysvar: Rent sysvar address
        cluster: Cluster name for Solana presets
        explorer_url: Transaction link template containing "{signature}"
    """
    name: str
    token_program: Pubkey
    associated_token_program: Pubkey
    system_program: Pubkey
    rpc_url: str
    amm: AmmProgramConfig
    native_mint: Pubkey
    rent_sysvar: Pubkey
    ws_url: Optional[str] = None
    commitment: str = "confirmed"
    cluster: Optional[str] = None
    explorer_url: Optional[str] = field(default=None)

    def __post_init__(self):
        if self.commitment not in COMMITMENT_LEVELS:
            raise ConfigurationError.invalid(
                "commitment", f"{self.commitment!r} not in {COMMITMENT_LEVELS}"
            )
        if not self.rpc_url:
            raise ConfigurationError.missing("rpc_url")

    def is_native_mint(self, mint: Pubkey) -> bool:
        return mint == self.native_mint

    def transaction_url(self, signature: str) -> Optional[str]:
        """Explorer link for a signature, if the chain has an explorer"""
        if not self.explorer_url or not signature:
            return None
        return self.explorer_url.format(signature=signature)
