"""
AMM program instruction builders

Constant-product AMM used by swap, pool creation and add liquidity.
Discriminators and PDA seeds come from AmmProgramConfig so another
deployment's ABI can be plugged in without code changes.

Swap data layout (10 bytes):
    discriminator: u8
    amount_in: u64
    direction_a_to_b: u8

InitPool / AddLiquidity data layout (17 bytes):
    discriminator: u8
    amount_a: u64
    amount_b: u64
"""

import struct
from dataclasses import dataclass
from typing import List, Tuple

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from ..errors import ErrorCode, ValidationError
from ..types.chain import BlockchainConfig
from .token import get_associated_token_address


def native_first(
    mint_x: Pubkey,
    mint_y: Pubkey,
    native_mint: Pubkey,
) -> Tuple[Pubkey, Pubkey, bool]:
    """
    Force the native mint into the token A slot, keeping the order otherwise.

    Returns:
        (token_a, token_b, swapped) where swapped is True if mint_y became A

    Raises:
        ValidationError: If both mints are the same (native or not)
    """
    if mint_x == mint_y:
        if mint_x == native_mint:
            raise ValidationError(
                "Cannot use a pool with the native asset on both sides",
                ErrorCode.INVALID_TOKEN_PAIR,
            )
        raise ValidationError(
            "Cannot use a pool with the same token on both sides",
            ErrorCode.INVALID_TOKEN_PAIR,
        )
    if mint_y == native_mint:
        return mint_y, mint_x, True
    return mint_x, mint_y, False


def canonical_pair(
    mint_x: Pubkey,
    mint_y: Pubkey,
    native_mint: Pubkey,
) -> Tuple[Pubkey, Pubkey, bool]:
    """
    Order two mints as (token_a, token_b).

    The native mint always goes to token A. Otherwise the smaller address
    (raw bytes) is token A.

    Returns:
        (token_a, token_b, swapped) where swapped is True if mint_y became A

    Raises:
        ValidationError: If both mints are the same
    """
    token_a, token_b, swapped = native_first(mint_x, mint_y, native_mint)
    if native_mint in (mint_x, mint_y):
        return token_a, token_b, swapped
    if bytes(mint_x) < bytes(mint_y):
        return mint_x, mint_y, False
    return mint_y, mint_x, True


def derive_pool_address(chain: BlockchainConfig, token_a: Pubkey, token_b: Pubkey) -> Pubkey:
    """Pool PDA: [pool_seed, token_a, token_b]"""
    amm = chain.amm
    pool, _ = Pubkey.find_program_address(
        [amm.pool_seed, bytes(token_a), bytes(token_b)],
        amm.program_id,
    )
    return pool


def derive_vault_address(
    chain: BlockchainConfig,
    pool: Pubkey,
    mint: Pubkey,
    is_native_pool: bool,
) -> Pubkey:
    """
    Vault PDA: [vault_seed | native_vault_seed, pool, mint]

    Pools holding the native asset use the native seed for both vaults.
    """
    amm = chain.amm
    seed = amm.native_vault_seed if is_native_pool else amm.vault_seed
    vault, _ = Pubkey.find_program_address(
        [seed, bytes(pool), bytes(mint)],
        amm.program_id,
    )
    return vault


def derive_lp_mint_address(chain: BlockchainConfig, pool: Pubkey, is_native_pool: bool) -> Pubkey:
    """LP mint PDA: [lp_mint_seed | native_lp_mint_seed, pool]"""
    amm = chain.amm
    seed = amm.native_lp_mint_seed if is_native_pool else amm.lp_mint_seed
    lp_mint, _ = Pubkey.find_program_address([seed, bytes(pool)], amm.program_id)
    return lp_mint


def user_token_account(chain: BlockchainConfig, owner: Pubkey, mint: Pubkey) -> Pubkey:
    """
    Account holding owner's balance of mint.

    For the native mint this is the wallet itself, otherwise the ATA.
    """
    if chain.is_native_mint(mint):
        return owner
    return get_associated_token_address(
        owner, mint, chain.token_program, chain.associated_token_program
    )


def common_accounts(chain: BlockchainConfig) -> List[AccountMeta]:
    """Program accounts every AMM instruction ends with"""
    return [
        AccountMeta(chain.token_program, is_signer=False, is_writable=False),
        AccountMeta(chain.associated_token_program, is_signer=False, is_writable=False),
        AccountMeta(chain.system_program, is_signer=False, is_writable=False),
        AccountMeta(chain.rent_sysvar, is_signer=False, is_writable=False),
    ]


def encode_swap_data(discriminator: int, amount_in: int, direction_a_to_b: bool) -> bytes:
    return struct.pack("<BQB", discriminator, amount_in, 1 if direction_a_to_b else 0)


def encode_liquidity_data(discriminator: int, amount_a: int, amount_b: int) -> bytes:
    return struct.pack("<BQQ", discriminator, amount_a, amount_b)


@dataclass
class SwapAccounts:
    """Accounts for one swap, in program order"""
    pool: Pubkey
    token_a: Pubkey
    token_b: Pubkey
    vault_a: Pubkey
    vault_b: Pubkey
    user_source: Pubkey
    user_destination: Pubkey
    user: Pubkey


@dataclass
class PoolAccounts:
    """Accounts for pool creation and add liquidity, in program order"""
    pool: Pubkey
    token_a: Pubkey
    token_b: Pubkey
    vault_a: Pubkey
    vault_b: Pubkey
    lp_mint: Pubkey
    user: Pubkey
    user_token_a: Pubkey
    user_token_b: Pubkey
    user_lp: Pubkey
    is_native_pool: bool


def swap_account_metas(chain: BlockchainConfig, accounts: SwapAccounts) -> List[AccountMeta]:
    return [
        AccountMeta(accounts.pool, is_signer=False, is_writable=True),
        AccountMeta(accounts.token_a, is_signer=False, is_writable=False),
        AccountMeta(accounts.token_b, is_signer=False, is_writable=False),
        AccountMeta(accounts.vault_a, is_signer=False, is_writable=True),
        AccountMeta(accounts.vault_b, is_signer=False, is_writable=True),
        AccountMeta(accounts.user_source, is_signer=False, is_writable=True),
        AccountMeta(accounts.user_destination, is_signer=False, is_writable=True),
        AccountMeta(accounts.user, is_signer=True, is_writable=False),
    ] + common_accounts(chain)


def build_swap_instruction(
    chain: BlockchainConfig,
    accounts: SwapAccounts,
    amount_in: int,
    direction_a_to_b: bool,
) -> Instruction:
    """
    Build AMM Swap instruction.

    Args:
        chain: Chain configuration (program IDs and AMM ABI)
        accounts: Resolved swap accounts
        amount_in: Raw input amount
        direction_a_to_b: True if the input is token A

    Returns:
        Swap instruction

    Raises:
        ValidationError: If the account list does not match the program's
            expected account count
    """
    metas = swap_account_metas(chain, accounts)
    expected = chain.amm.swap_account_count
    if len(metas) != expected:
        raise ValidationError.account_count(expected, len(metas))

    data = encode_swap_data(chain.amm.swap_discriminator, amount_in, direction_a_to_b)
    return Instruction(chain.amm.program_id, data, metas)


def pool_account_metas(chain: BlockchainConfig, accounts: PoolAccounts) -> List[AccountMeta]:
    metas = [
        AccountMeta(accounts.pool, is_signer=False, is_writable=True),
        AccountMeta(accounts.token_a, is_signer=False, is_writable=False),
        AccountMeta(accounts.token_b, is_signer=False, is_writable=False),
        AccountMeta(accounts.vault_a, is_signer=False, is_writable=True),
        AccountMeta(accounts.vault_b, is_signer=False, is_writable=True),
        AccountMeta(accounts.lp_mint, is_signer=False, is_writable=True),
        # User pays lamports directly into the native vault
        AccountMeta(accounts.user, is_signer=True, is_writable=accounts.is_native_pool),
        AccountMeta(accounts.user_token_a, is_signer=False, is_writable=True),
        AccountMeta(accounts.user_token_b, is_signer=False, is_writable=True),
        AccountMeta(accounts.user_lp, is_signer=False, is_writable=True),
    ] + common_accounts(chain)
    if accounts.is_native_pool:
        metas.append(AccountMeta(chain.system_program, is_signer=False, is_writable=False))
    return metas


def build_init_pool_instruction(
    chain: BlockchainConfig,
    accounts: PoolAccounts,
    amount_a: int,
    amount_b: int,
) -> Instruction:
    """Build AMM InitPool instruction seeding the pool with amount_a / amount_b"""
    data = encode_liquidity_data(chain.amm.init_pool_discriminator, amount_a, amount_b)
    return Instruction(chain.amm.program_id, data, pool_account_metas(chain, accounts))


def build_add_liquidity_instruction(
    chain: BlockchainConfig,
    accounts: PoolAccounts,
    amount_a: int,
    amount_b: int,
) -> Instruction:
    """Build AMM AddLiquidity instruction"""
    data = encode_liquidity_data(chain.amm.add_liquidity_discriminator, amount_a, amount_b)
    return Instruction(chain.amm.program_id, data, pool_account_metas(chain, accounts))
