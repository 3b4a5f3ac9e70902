"""
Transfer builders

Native transfers read no chain state. Token transfers move balances between
associated token accounts; ensure_token_accounts_exist builds the account
creations a transfer may need first.
"""

import logging
from typing import Optional

from ..errors import SDKError, ValidationError
from ..infra.rpc import RpcClient
from ..instructions.system import build_transfer_instruction
from ..instructions.token import (
    build_create_associated_token_account_instruction,
    build_transfer_checked_instruction,
    get_associated_token_address,
)
from ..types import (
    BlockchainConfig,
    EnsureTokenAccountsParams,
    EnsureTokenAccountsResult,
    TokenTransferParams,
    TokenTransferTransactionResult,
    TransferSOLParams,
    TransferTransactionResult,
    UnsignedTransaction,
    require_positive,
    require_u64,
    sol_to_lamports,
    to_int,
    to_pubkey,
    to_raw_amount,
)

logger = logging.getLogger(__name__)


def create_native_transfer_transaction(
    chain: BlockchainConfig,
    params: TransferSOLParams,
) -> TransferTransactionResult:
    """
    Build a native transfer of floor(amount_sol * 10**9) lamports

    The fee payer defaults to the sender. Only a blockhash is needed later,
    fetched during signing.

    Args:
        chain: Chain configuration
        params: Transfer parameters

    Returns:
        TransferTransactionResult

    Raises:
        ValidationError: Non-positive amount or malformed address
    """
    amount = require_positive(params.amount_sol, "amount_sol")
    from_pubkey = to_pubkey(params.from_pubkey, "from_pubkey")
    to_pubkey_ = to_pubkey(params.to_pubkey, "to_pubkey")
    fee_payer = to_pubkey(params.fee_payer, "fee_payer") if params.fee_payer else from_pubkey

    lamports = require_u64(sol_to_lamports(amount), "amount_sol")
    if lamports == 0:
        raise ValidationError.non_positive("amount_sol", params.amount_sol)

    transaction = UnsignedTransaction(fee_payer=fee_payer)
    transaction.add(build_transfer_instruction(from_pubkey, to_pubkey_, lamports))

    logger.info(
        f"Built {chain.name} transfer: {lamports} lamports {from_pubkey} -> {to_pubkey_} "
        f"(fee payer {fee_payer})"
    )
    return TransferTransactionResult(
        transaction=transaction,
        from_pubkey=from_pubkey,
        to_pubkey=to_pubkey_,
        amount_lamports=lamports,
        fee_payer=fee_payer,
    )


def create_token_transfer_transaction(
    chain: BlockchainConfig,
    params: TokenTransferParams,
) -> TokenTransferTransactionResult:
    """
    Build a TransferChecked between the sender's and recipient's ATAs

    Both accounts must already exist (see ensure_token_accounts_exist).

    Raises:
        ValidationError: Non-positive amount or malformed address
    """
    amount = require_positive(params.amount, "amount")
    decimals = to_int(params.decimals, "decimals", maximum=255)
    mint = to_pubkey(params.mint, "mint")
    from_pubkey = to_pubkey(params.from_pubkey, "from_pubkey")
    to_pubkey_ = to_pubkey(params.to_pubkey, "to_pubkey")
    fee_payer = to_pubkey(params.fee_payer, "fee_payer") if params.fee_payer else from_pubkey

    amount_raw = require_u64(to_raw_amount(amount, decimals), "amount")
    if amount_raw == 0:
        raise ValidationError.non_positive("amount", params.amount)

    source = get_associated_token_address(
        from_pubkey, mint, chain.token_program, chain.associated_token_program
    )
    destination = get_associated_token_address(
        to_pubkey_, mint, chain.token_program, chain.associated_token_program
    )

    transaction = UnsignedTransaction(fee_payer=fee_payer)
    transaction.add(
        build_transfer_checked_instruction(
            source=source,
            mint=mint,
            destination=destination,
            owner=from_pubkey,
            amount=amount_raw,
            decimals=decimals,
            token_program=chain.token_program,
        )
    )

    logger.info(f"Built token transfer: {amount_raw} raw of {mint} {from_pubkey} -> {to_pubkey_}")
    return TokenTransferTransactionResult(
        transaction=transaction,
        mint=mint,
        from_pubkey=from_pubkey,
        to_pubkey=to_pubkey_,
        amount_raw=amount_raw,
        from_token_account=source,
        to_token_account=destination,
        fee_payer=fee_payer,
    )


async def ensure_token_accounts_exist(
    rpc: RpcClient,
    chain: BlockchainConfig,
    params: EnsureTokenAccountsParams,
) -> EnsureTokenAccountsResult:
    """
    Check both parties' ATAs and build creations for the missing ones

    Returns:
        EnsureTokenAccountsResult; transaction is None if nothing is missing

    Raises:
        ValidationError: Malformed address
        SDKError: RPC failure
    """
    mint = to_pubkey(params.mint, "mint")
    from_pubkey = to_pubkey(params.from_pubkey, "from_pubkey")
    to_pubkey_ = to_pubkey(params.to_pubkey, "to_pubkey")
    fee_payer = to_pubkey(params.fee_payer, "fee_payer") if params.fee_payer else from_pubkey

    source = get_associated_token_address(
        from_pubkey, mint, chain.token_program, chain.associated_token_program
    )
    destination = get_associated_token_address(
        to_pubkey_, mint, chain.token_program, chain.associated_token_program
    )

    try:
        from_exists = bool(await rpc.get_account_info(str(source)))
        to_exists = bool(await rpc.get_account_info(str(destination)))
    except Exception as e:
        raise SDKError.wrap("Failed to check token accounts", e) from e

    transaction: Optional[UnsignedTransaction] = None
    created = []
    for owner, account, exists in (
        (from_pubkey, source, from_exists),
        (to_pubkey_, destination, to_exists),
    ):
        if exists or account in created:
            continue
        if transaction is None:
            transaction = UnsignedTransaction(fee_payer=fee_payer)
        transaction.add(
            build_create_associated_token_account_instruction(
                payer=fee_payer,
                associated_token=account,
                owner=owner,
                mint=mint,
                token_program=chain.token_program,
                associated_token_program=chain.associated_token_program,
            )
        )
        created.append(account)

    if created:
        logger.info(f"Token accounts to create for {mint}: {[str(a) for a in created]}")

    return EnsureTokenAccountsResult(
        from_token_account=source,
        to_token_account=destination,
        from_account_exists=from_exists,
        to_account_exists=to_exists,
        created_accounts=created,
        transaction=transaction,
    )
