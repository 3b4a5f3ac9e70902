"""
Program addresses and preset chain configurations

Gorbchain runs its own Token-2022 and associated-token deployments; Solana
uses the canonical ones. The AMM values are the Gorbchain deployment's and
serve as defaults only (see AmmProgramConfig).
"""

from typing import Dict, Optional, Union

from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM
from solders.sysvar import RENT

from .errors import ConfigurationError
from .types.chain import AmmProgramConfig, BlockchainConfig

SYSTEM_PROGRAM_ID = str(SYSTEM_PROGRAM)

# Wrapped SOL mint; stands for the native asset in AMM pools
NATIVE_MINT = "So11111111111111111111111111111111111111112"

# Gorbchain program IDs
GORBCHAIN_TOKEN22_PROGRAM_ID = "G22oYgZ6LnVcy7v8eSNi2xpNk1NcZiPD8CVKSTut7oZ6"
GORBCHAIN_ASSOCIATED_TOKEN_PROGRAM_ID = "GoATGVNeSXerFerPqTJ8hcED1msPWHHLxao2vwBYqowm"
GORBCHAIN_AMM_PROGRAM_ID = "EtGrXaRpEdozMtfd8tbkbrbDN8LqZNba3xWTdT3HtQWq"

# Solana program IDs
SOLANA_TOKEN22_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"
SOLANA_ASSOCIATED_TOKEN_PROGRAM_ID = "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"

GORBCHAIN_PROGRAMS: Dict[str, str] = {
    "TOKEN22_PROGRAM": GORBCHAIN_TOKEN22_PROGRAM_ID,
    "ASSOCIATED_TOKEN_PROGRAM": GORBCHAIN_ASSOCIATED_TOKEN_PROGRAM_ID,
    "SYSTEM_PROGRAM": SYSTEM_PROGRAM_ID,
    "AMM_PROGRAM": GORBCHAIN_AMM_PROGRAM_ID,
}

SOLANA_PROGRAMS: Dict[str, str] = {
    "TOKEN22_PROGRAM": SOLANA_TOKEN22_PROGRAM_ID,
    "ASSOCIATED_TOKEN_PROGRAM": SOLANA_ASSOCIATED_TOKEN_PROGRAM_ID,
    "SYSTEM_PROGRAM": SYSTEM_PROGRAM_ID,
}

DEFAULT_AMM = AmmProgramConfig(program_id=Pubkey.from_string(GORBCHAIN_AMM_PROGRAM_ID))


def _pubkey(value: Union[str, Pubkey], param: str) -> Pubkey:
    if isinstance(value, Pubkey):
        return value
    try:
        return Pubkey.from_string(value)
    except (ValueError, TypeError):
        raise ConfigurationError.invalid(param, f"not a valid address: {value!r}")


GORBCHAIN_CONFIG = BlockchainConfig(
    name="gorbchain",
    token_program=_pubkey(GORBCHAIN_TOKEN22_PROGRAM_ID, "token_program"),
    associated_token_program=_pubkey(GORBCHAIN_ASSOCIATED_TOKEN_PROGRAM_ID, "associated_token_program"),
    system_program=SYSTEM_PROGRAM,
    rpc_url="https://rpc.gorbchain.xyz",
    ws_url="wss://rpc.gorbchain.xyz/ws/",
    commitment="confirmed",
    amm=DEFAULT_AMM,
    native_mint=_pubkey(NATIVE_MINT, "native_mint"),
    rent_sysvar=RENT,
)

SOLANA_MAINNET_CONFIG = BlockchainConfig(
    name="solana",
    cluster="mainnet-beta",
    token_program=_pubkey(SOLANA_TOKEN22_PROGRAM_ID, "token_program"),
    associated_token_program=_pubkey(SOLANA_ASSOCIATED_TOKEN_PROGRAM_ID, "associated_token_program"),
    system_program=SYSTEM_PROGRAM,
    rpc_url="https://api.mainnet-beta.solana.com",
    commitment="confirmed",
    amm=DEFAULT_AMM,
    native_mint=_pubkey(NATIVE_MINT, "native_mint"),
    rent_sysvar=RENT,
    explorer_url="https://explorer.solana.com/tx/{signature}",
)

SOLANA_DEVNET_CONFIG = BlockchainConfig(
    name="solana",
    cluster="devnet",
    token_program=_pubkey(SOLANA_TOKEN22_PROGRAM_ID, "token_program"),
    associated_token_program=_pubkey(SOLANA_ASSOCIATED_TOKEN_PROGRAM_ID, "associated_token_program"),
    system_program=SYSTEM_PROGRAM,
    rpc_url="https://api.devnet.solana.com",
    commitment="confirmed",
    amm=DEFAULT_AMM,
    native_mint=_pubkey(NATIVE_MINT, "native_mint"),
    rent_sysvar=RENT,
    explorer_url="https://explorer.solana.com/tx/{signature}?cluster=devnet",
)

DEFAULT_CONFIGS: Dict[str, BlockchainConfig] = {
    "gorbchain": GORBCHAIN_CONFIG,
    "solana": SOLANA_MAINNET_CONFIG,
    "solana-devnet": SOLANA_DEVNET_CONFIG,
}


def get_blockchain_config(name: str) -> BlockchainConfig:
    """
    Look up a preset configuration

    Raises:
        ConfigurationError: If the name is not a known preset
    """
    try:
        return DEFAULT_CONFIGS[name]
    except KeyError:
        raise ConfigurationError.invalid(
            "chain", f"unknown chain {name!r}, expected one of {sorted(DEFAULT_CONFIGS)}"
        )


def create_blockchain_config(
    token_program: Union[str, Pubkey],
    associated_token_program: Union[str, Pubkey],
    rpc_url: str,
    ws_url: Optional[str] = None,
    commitment: str = "confirmed",
    name: str = "custom",
    amm: Optional[AmmProgramConfig] = None,
    native_mint: Union[str, Pubkey] = NATIVE_MINT,
    explorer_url: Optional[str] = None,
) -> BlockchainConfig:
    """
    Build a configuration for a custom Solana-compatible chain

    Args:
        token_program: Token-2022 compatible program address
        associated_token_program: Associated token account program address
        rpc_url: JSON-RPC endpoint
        ws_url: Optional websocket endpoint
        commitment: Default commitment level
        name: Chain name
        amm: AMM program ABI (defaults to the Gorbchain deployment's)
        native_mint: Mint that stands for the native asset in pools
        explorer_url: Transaction link template containing "{signature}"

    Returns:
        Immutable BlockchainConfig
    """
    return BlockchainConfig(
        name=name,
        token_program=_pubkey(token_program, "token_program"),
        associated_token_program=_pubkey(associated_token_program, "associated_token_program"),
        system_program=SYSTEM_PROGRAM,
        rpc_url=rpc_url,
        ws_url=ws_url,
        commitment=commitment,
        amm=amm or DEFAULT_AMM,
        native_mint=_pubkey(native_mint, "native_mint"),
        rent_sysvar=RENT,
        explorer_url=explorer_url,
    )
