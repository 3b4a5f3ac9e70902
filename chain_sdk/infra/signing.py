"""
Signing functions

Every shape fetches a fresh blockhash first, then compiles the message and
attaches signatures. Builder-attached extra signers (e.g. a new mint
keypair) are applied after the blockhash is set, so their signatures cover
the same message as everyone else's.

A transaction is only returned once every required signature is present.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Union

from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction

from ..errors import SigningError
from ..types import UnsignedTransaction
from .rpc import RpcClient
from .solana_signer import (
    LocalSigner,
    RemoteSigner,
    Wallet,
    as_local_signer,
    as_remote_signer,
)

logger = logging.getLogger(__name__)

KeypairLike = Union[Keypair, LocalSigner]
WalletLike = Union[Wallet, RemoteSigner]


async def refresh_blockhash(rpc: RpcClient, transaction: UnsignedTransaction) -> str:
    """Fetch the latest blockhash and set it on the transaction"""
    value = await rpc.get_latest_blockhash()
    blockhash = value["blockhash"]
    transaction.set_blockhash(blockhash, value.get("lastValidBlockHeight"))
    logger.debug(f"Set blockhash {blockhash} (valid until {value.get('lastValidBlockHeight')})")
    return blockhash


def required_signers(message: Message) -> List[Pubkey]:
    count = message.header.num_required_signatures
    return list(message.account_keys[:count])


def partially_sign(transaction: Transaction, keypairs: Sequence[Keypair]) -> Transaction:
    """
    Add keypair signatures to a transaction, keeping existing ones.

    Raises:
        SigningError: If a keypair is not a required signer of the message
    """
    message = transaction.message
    signers = required_signers(message)
    signatures = list(transaction.signatures)
    if len(signatures) != len(signers):
        signatures = [Signature.default()] * len(signers)

    message_bytes = bytes(message)
    for keypair in keypairs:
        pubkey = keypair.pubkey()
        if pubkey not in signers:
            raise SigningError.failed(
                f"{pubkey} is not a required signer. "
                f"Expected signers: {[str(s) for s in signers]}"
            )
        signatures[signers.index(pubkey)] = keypair.sign_message(message_bytes)

    return Transaction.populate(message, signatures)


def missing_signers(transaction: Transaction) -> List[Pubkey]:
    signers = required_signers(transaction.message)
    signatures = list(transaction.signatures)
    missing = []
    for i, signer in enumerate(signers):
        if i >= len(signatures) or signatures[i] == Signature.default():
            missing.append(signer)
    return missing


def ensure_fully_signed(transaction: Transaction) -> Transaction:
    """
    Raises:
        SigningError: If any required signature is missing or does not
            verify against the message
    """
    missing = missing_signers(transaction)
    if missing:
        raise SigningError.missing_signatures([str(m) for m in missing])
    try:
        transaction.verify()
    except Exception as e:
        raise SigningError.failed(f"signature verification failed: {e}", e) from e
    return transaction


def _unique(keypairs: Sequence[Keypair]) -> List[Keypair]:
    seen = set()
    result = []
    for keypair in keypairs:
        pubkey = keypair.pubkey()
        if pubkey in seen:
            continue
        seen.add(pubkey)
        result.append(keypair)
    return result


async def _prepare(
    rpc: RpcClient,
    transaction: UnsignedTransaction,
    fee_payer: Pubkey,
    refresh: bool,
) -> Message:
    if transaction.fee_payer is None:
        transaction.fee_payer = fee_payer
    if refresh or transaction.recent_blockhash is None:
        await refresh_blockhash(rpc, transaction)
    return transaction.compile()


def _sign_locally(
    message: Message,
    transaction: UnsignedTransaction,
    keypairs: Sequence[Keypair],
) -> Transaction:
    signers = required_signers(message)
    unsigned = Transaction.populate(message, [Signature.default()] * len(signers))
    keypairs = _unique(list(transaction.extra_signers) + list(keypairs))
    return partially_sign(unsigned, keypairs)


async def sign_with_keypair(
    rpc: RpcClient,
    transaction: UnsignedTransaction,
    keypair: KeypairLike,
    refresh_blockhash: bool = True,
) -> Transaction:
    """
    Sign with a single local keypair

    The keypair pays the fee unless the transaction already names a fee payer.

    Args:
        rpc: RPC client (blockhash source)
        transaction: Built transaction
        keypair: Keypair or LocalSigner
        refresh_blockhash: Fetch a fresh blockhash before signing

    Returns:
        Fully signed transaction

    Raises:
        SigningError: On any failure, including missing signatures
    """
    try:
        signer = as_local_signer(keypair)
        message = await _prepare(rpc, transaction, signer.pubkey, refresh_blockhash)
        signed = _sign_locally(message, transaction, [signer.keypair])
        ensure_fully_signed(signed)
        logger.info(f"Signed transaction {signed.signatures[0]} with keypair {signer.pubkey}")
        return signed
    except SigningError:
        raise
    except Exception as e:
        raise SigningError.failed(f"keypair signing error: {e}", e)


async def sign_with_dual_keypairs(
    rpc: RpcClient,
    transaction: UnsignedTransaction,
    sender: KeypairLike,
    fee_payer: Optional[KeypairLike] = None,
    refresh_blockhash: bool = True,
) -> Transaction:
    """
    Sign with sender and a separate fee payer keypair

    The second signature is skipped when both keys are the same.

    Raises:
        SigningError: On any failure, including missing signatures
    """
    try:
        sender_signer = as_local_signer(sender)
        payer_signer = as_local_signer(fee_payer) if fee_payer is not None else sender_signer

        keypairs = [sender_signer.keypair]
        if payer_signer.pubkey != sender_signer.pubkey:
            keypairs.append(payer_signer.keypair)

        message = await _prepare(rpc, transaction, payer_signer.pubkey, refresh_blockhash)
        signed = _sign_locally(message, transaction, keypairs)
        ensure_fully_signed(signed)
        logger.info(
            f"Signed transaction {signed.signatures[0]} "
            f"(sender={sender_signer.pubkey}, fee_payer={payer_signer.pubkey})"
        )
        return signed
    except SigningError:
        raise
    except Exception as e:
        raise SigningError.failed(f"dual keypair signing error: {e}", e)


async def sign_with_wallet(
    rpc: RpcClient,
    transaction: UnsignedTransaction,
    wallet: WalletLike,
    refresh_blockhash: bool = True,
) -> Transaction:
    """
    Sign through a wallet callback

    Extra signers attached by the builder sign before the wallet is asked.

    Raises:
        SigningError: On wallet rejection or any other failure
    """
    return await sign_with_wallet_and_keypair(
        rpc, transaction, wallet, None, refresh_blockhash=refresh_blockhash
    )


async def sign_with_wallet_and_keypair(
    rpc: RpcClient,
    transaction: UnsignedTransaction,
    wallet: WalletLike,
    keypair: Optional[KeypairLike] = None,
    refresh_blockhash: bool = True,
) -> Transaction:
    """
    Sign through a wallet callback plus one local keypair

    The keypair is typically a second required signer such as a fee payer
    or a new mint account. It is skipped if it is the wallet's own key.

    Raises:
        SigningError: On wallet rejection or any other failure
    """
    try:
        remote = as_remote_signer(wallet)
        keypairs: List[Keypair] = []
        if keypair is not None:
            local = as_local_signer(keypair)
            if local.pubkey != remote.pubkey:
                keypairs.append(local.keypair)

        message = await _prepare(rpc, transaction, remote.pubkey, refresh_blockhash)
        partially_signed = _sign_locally(message, transaction, keypairs)
        signed = await remote.sign_transaction(partially_signed)
        ensure_fully_signed(signed)
        logger.info(f"Signed transaction {signed.signatures[0]} with wallet {remote.pubkey}")
        return signed
    except SigningError:
        raise
    except Exception as e:
        raise SigningError.failed(f"wallet signing error: {e}", e)


async def sign_all_with_wallet(
    rpc: RpcClient,
    transactions: Sequence[UnsignedTransaction],
    wallet: WalletLike,
    refresh_blockhash: bool = True,
) -> List[Transaction]:
    """
    Sign several transactions with one wallet request

    All transactions share one freshly fetched blockhash.

    Raises:
        SigningError: If the wallet lacks sign_all_transactions or any
            transaction is left partially signed
    """
    try:
        remote = as_remote_signer(wallet)
        if not remote.supports_sign_all:
            raise SigningError.failed("Wallet does not support sign_all_transactions")

        blockhash_value = None
        if refresh_blockhash or any(tx.recent_blockhash is None for tx in transactions):
            blockhash_value = await rpc.get_latest_blockhash()

        prepared = []
        for tx in transactions:
            if tx.fee_payer is None:
                tx.fee_payer = remote.pubkey
            if blockhash_value is not None:
                tx.set_blockhash(
                    blockhash_value["blockhash"],
                    blockhash_value.get("lastValidBlockHeight"),
                )
            prepared.append(_sign_locally(tx.compile(), tx, []))

        signed = await remote.sign_all_transactions(prepared)
        if len(signed) != len(prepared):
            raise SigningError.failed(
                f"Wallet returned {len(signed)} transactions, expected {len(prepared)}"
            )
        for tx in signed:
            ensure_fully_signed(tx)
        logger.info(f"Signed {len(signed)} transactions with wallet {remote.pubkey}")
        return signed
    except SigningError:
        raise
    except Exception as e:
        raise SigningError.failed(f"wallet batch signing error: {e}", e)
