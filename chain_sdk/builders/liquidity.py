"""
Pool creation and add-liquidity builders

Both share one account layout and differ only in the discriminator and in
where the pool address comes from (derived for creation, given for deposits).
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Tuple

from solders.pubkey import Pubkey

from ..errors import SDKError, ValidationError
from ..instructions.amm import (
    PoolAccounts,
    build_add_liquidity_instruction,
    build_init_pool_instruction,
    canonical_pair,
    derive_lp_mint_address,
    derive_pool_address,
    derive_vault_address,
    native_first,
    user_token_account,
)
from ..types import (
    SOL_DECIMALS,
    AddLiquidityParams,
    AddLiquidityTransactionResult,
    BlockchainConfig,
    CreatePoolParams,
    PoolTransactionResult,
    TokenInfo,
    UnsignedTransaction,
    require_positive,
    require_u64,
    to_pubkey,
    to_raw_amount,
)

logger = logging.getLogger(__name__)


@dataclass
class _PoolSide:
    """One pool slot after canonical ordering"""
    mint: Pubkey
    info: TokenInfo
    amount: Decimal


def _order_sides(
    chain: BlockchainConfig,
    first: _PoolSide,
    second: _PoolSide,
    ordering: Callable[[Pubkey, Pubkey, Pubkey], Tuple[Pubkey, Pubkey, bool]],
) -> Tuple[_PoolSide, _PoolSide]:
    _, _, swapped = ordering(first.mint, second.mint, chain.native_mint)
    if swapped:
        first, second = second, first
    return first, second


def _raw_amount(chain: BlockchainConfig, side: _PoolSide, field: str) -> int:
    decimals = SOL_DECIMALS if chain.is_native_mint(side.mint) else side.info.decimals
    raw = require_u64(to_raw_amount(side.amount, decimals), field)
    if raw == 0:
        raise ValidationError.non_positive(field, side.amount)
    return raw


def _pool_accounts(
    chain: BlockchainConfig,
    pool: Pubkey,
    side_a: _PoolSide,
    side_b: _PoolSide,
    user: Pubkey,
) -> PoolAccounts:
    is_native_pool = chain.is_native_mint(side_a.mint) or chain.is_native_mint(side_b.mint)
    lp_mint = derive_lp_mint_address(chain, pool, is_native_pool)
    return PoolAccounts(
        pool=pool,
        token_a=side_a.mint,
        token_b=side_b.mint,
        vault_a=derive_vault_address(chain, pool, side_a.mint, is_native_pool),
        vault_b=derive_vault_address(chain, pool, side_b.mint, is_native_pool),
        lp_mint=lp_mint,
        user=user,
        user_token_a=user_token_account(chain, user, side_a.mint),
        user_token_b=user_token_account(chain, user, side_b.mint),
        user_lp=user_token_account(chain, user, lp_mint),
        is_native_pool=is_native_pool,
    )


def create_pool_transaction(
    chain: BlockchainConfig,
    params: CreatePoolParams,
) -> PoolTransactionResult:
    """
    Build an AMM InitPool seeded with amount_a / amount_b

    The pair is put in canonical order first (native asset in token A,
    else the smaller address), carrying amounts and token info with it,
    so swaps between the same two tokens resolve to this pool.

    Args:
        chain: Chain configuration (AMM ABI included)
        params: Pool parameters (UI amounts)

    Returns:
        PoolTransactionResult

    Raises:
        ValidationError: Non-positive amount, malformed address, or the
            same token (native or not) on both sides, checked before any
            derivation
        SDKError: Any other failure while deriving or encoding
    """
    amount_a = require_positive(params.amount_a, "amount_a")
    amount_b = require_positive(params.amount_b, "amount_b")
    mint_a = to_pubkey(params.token_a.address, "token_a.address")
    mint_b = to_pubkey(params.token_b.address, "token_b.address")
    user = to_pubkey(params.from_pubkey, "from_pubkey")
    fee_payer = to_pubkey(params.fee_payer, "fee_payer") if params.fee_payer else user

    side_a, side_b = _order_sides(
        chain,
        _PoolSide(mint_a, params.token_a, amount_a),
        _PoolSide(mint_b, params.token_b, amount_b),
        canonical_pair,
    )
    amount_a_raw = _raw_amount(chain, side_a, "amount_a")
    amount_b_raw = _raw_amount(chain, side_b, "amount_b")

    try:
        pool = derive_pool_address(chain, side_a.mint, side_b.mint)
        accounts = _pool_accounts(chain, pool, side_a, side_b, user)
        instruction = build_init_pool_instruction(chain, accounts, amount_a_raw, amount_b_raw)
    except ValidationError:
        raise
    except Exception as e:
        raise SDKError.wrap("Failed to create pool transaction", e) from e

    transaction = UnsignedTransaction(fee_payer=fee_payer)
    transaction.add(instruction)

    logger.info(
        f"Built pool creation {side_a.info}/{side_b.info}: pool={pool}, "
        f"amounts=({amount_a_raw}, {amount_b_raw}), native={accounts.is_native_pool}"
    )
    return PoolTransactionResult(
        transaction=transaction,
        pool=pool,
        token_a=accounts.token_a,
        token_b=accounts.token_b,
        lp_mint=accounts.lp_mint,
        vault_a=accounts.vault_a,
        vault_b=accounts.vault_b,
        is_native_pool=accounts.is_native_pool,
        amount_a_raw=amount_a_raw,
        amount_b_raw=amount_b_raw,
    )


def create_add_liquidity_transaction(
    chain: BlockchainConfig,
    params: AddLiquidityParams,
) -> AddLiquidityTransactionResult:
    """
    Build an AMM AddLiquidity into an existing pool

    The pool's own token order is kept, except that a native asset in the
    B slot is moved to A together with its amount.

    Raises:
        ValidationError: Non-positive amount, malformed address, or the
            same token (native or not) on both sides
        SDKError: Any other failure while deriving or encoding
    """
    amount_a = require_positive(params.amount_a, "amount_a")
    amount_b = require_positive(params.amount_b, "amount_b")
    if params.pool is None:
        raise ValidationError("Pool information must be provided", field="pool")
    pool = to_pubkey(params.pool.address, "pool.address")
    mint_a = to_pubkey(params.pool.token_a.address, "pool.token_a.address")
    mint_b = to_pubkey(params.pool.token_b.address, "pool.token_b.address")
    user = to_pubkey(params.from_pubkey, "from_pubkey")
    fee_payer = to_pubkey(params.fee_payer, "fee_payer") if params.fee_payer else user

    side_a, side_b = _order_sides(
        chain,
        _PoolSide(mint_a, params.pool.token_a, amount_a),
        _PoolSide(mint_b, params.pool.token_b, amount_b),
        native_first,
    )
    amount_a_raw = _raw_amount(chain, side_a, "amount_a")
    amount_b_raw = _raw_amount(chain, side_b, "amount_b")

    try:
        accounts = _pool_accounts(chain, pool, side_a, side_b, user)
        instruction = build_add_liquidity_instruction(chain, accounts, amount_a_raw, amount_b_raw)
    except ValidationError:
        raise
    except Exception as e:
        raise SDKError.wrap("Failed to create add liquidity transaction", e) from e

    transaction = UnsignedTransaction(fee_payer=fee_payer)
    transaction.add(instruction)

    logger.info(
        f"Built add liquidity {side_a.info}/{side_b.info}: pool={pool}, "
        f"amounts=({amount_a_raw}, {amount_b_raw})"
    )
    return AddLiquidityTransactionResult(
        transaction=transaction,
        pool=pool,
        token_a=accounts.token_a,
        token_b=accounts.token_b,
        lp_mint=accounts.lp_mint,
        vault_a=accounts.vault_a,
        vault_b=accounts.vault_b,
        is_native_pool=accounts.is_native_pool,
        amount_a_raw=amount_a_raw,
        amount_b_raw=amount_b_raw,
        user_token_a=accounts.user_token_a,
        user_token_b=accounts.user_token_b,
        user_lp=accounts.user_lp,
    )
