"""
Swap builder

Resolves a token pair to its AMM pool and builds one Swap instruction.
No chain state is read: the pool, vaults and user accounts are all derived.
"""

import logging

from ..errors import SDKError, ValidationError
from ..instructions.amm import (
    SwapAccounts,
    build_swap_instruction,
    canonical_pair,
    derive_pool_address,
    derive_vault_address,
    user_token_account,
)
from ..types import (
    SOL_DECIMALS,
    BlockchainConfig,
    SwapParams,
    SwapTransactionResult,
    UnsignedTransaction,
    require_positive,
    require_u64,
    to_pubkey,
    to_raw_amount,
)

logger = logging.getLogger(__name__)


def create_swap_transaction(
    chain: BlockchainConfig,
    params: SwapParams,
) -> SwapTransactionResult:
    """
    Build an AMM swap of from_token_amount from_token into to_token

    The pool is the one created for the canonical ordering of the pair
    (native asset first, else the smaller address first).
    slippage_tolerance is logged only; the program enforces no minimum out.

    Args:
        chain: Chain configuration (AMM ABI included)
        params: Swap parameters

    Returns:
        SwapTransactionResult with every derived address

    Raises:
        ValidationError: Non-positive amount, malformed address, invalid pair
            or an account list that does not match the program layout
        SDKError: Any other failure while deriving or encoding
    """
    amount = require_positive(params.from_token_amount, "from_token_amount")
    from_mint = to_pubkey(params.from_token.address, "from_token.address")
    to_mint = to_pubkey(params.to_token.address, "to_token.address")
    user = to_pubkey(params.from_pubkey, "from_pubkey")
    fee_payer = to_pubkey(params.fee_payer, "fee_payer") if params.fee_payer else user

    try:
        token_a, token_b, _ = canonical_pair(from_mint, to_mint, chain.native_mint)
        direction_a_to_b = from_mint == token_a

        is_from_native = chain.is_native_mint(from_mint)
        is_native_swap = is_from_native or chain.is_native_mint(to_mint)

        decimals = SOL_DECIMALS if is_from_native else params.from_token.decimals
        amount_in = require_u64(to_raw_amount(amount, decimals), "from_token_amount")
        if amount_in == 0:
            raise ValidationError.non_positive("from_token_amount", params.from_token_amount)

        pool = derive_pool_address(chain, token_a, token_b)
        vault_a = derive_vault_address(chain, pool, token_a, is_native_swap)
        vault_b = derive_vault_address(chain, pool, token_b, is_native_swap)
        user_from = user_token_account(chain, user, from_mint)
        user_to = user_token_account(chain, user, to_mint)

        logger.debug(
            f"Swap {params.from_token} -> {params.to_token}: pool={pool}, "
            f"direction={'A to B' if direction_a_to_b else 'B to A'}, native={is_native_swap}"
        )

        instruction = build_swap_instruction(
            chain,
            SwapAccounts(
                pool=pool,
                token_a=token_a,
                token_b=token_b,
                vault_a=vault_a,
                vault_b=vault_b,
                user_source=user_from,
                user_destination=user_to,
                user=user,
            ),
            amount_in,
            direction_a_to_b,
        )
    except ValidationError:
        raise
    except Exception as e:
        raise SDKError.wrap("Failed to create swap transaction", e) from e

    transaction = UnsignedTransaction(fee_payer=fee_payer)
    transaction.add(instruction)

    logger.info(
        f"Built swap: {amount} {params.from_token} -> {params.to_token} "
        f"(raw {amount_in}, slippage {params.slippage_tolerance}%)"
    )
    return SwapTransactionResult(
        transaction=transaction,
        from_token=params.from_token,
        to_token=params.to_token,
        from_token_amount=params.from_token_amount,
        amount_in_raw=amount_in,
        from_pubkey=user,
        fee_payer=fee_payer,
        pool=pool,
        token_a=token_a,
        token_b=token_b,
        vault_a=vault_a,
        vault_b=vault_b,
        user_from_account=user_from,
        user_to_account=user_to,
        direction_a_to_b=direction_a_to_b,
        is_native_swap=is_native_swap,
    )
