"""
Transaction submission

Send, confirm, simulate and look up signed transactions. Every function here
returns a result object instead of raising, so batch callers can inspect
partial outcomes.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, List, Optional, Sequence, Union

from solders.signature import Signature
from solders.transaction import Transaction

from ..config import get_config
from ..errors import SDKError, TransactionError
from ..types import (
    CONFIRMATION_TIMEOUT,
    ConfirmationResult,
    SimulationResult,
    SubmitOptions,
    SubmitResult,
    TransactionDetails,
    UnsignedTransaction,
    commitment_rank,
)
from .rpc import RpcClient
from .signing import refresh_blockhash, required_signers

logger = logging.getLogger(__name__)

DEFAULT_CONFIRMATION_TIMEOUT_MS = 30_000


def _error_text(error: Any) -> str:
    if isinstance(error, SDKError):
        return error.message
    if isinstance(error, (dict, list)):
        return json.dumps(error)
    return str(error) or error.__class__.__name__


def _reached(status: dict, commitment: str) -> bool:
    return commitment_rank(status.get("confirmationStatus")) >= commitment_rank(commitment)


async def wait_for_confirmation(
    rpc: RpcClient,
    signature: str,
    commitment: str = "confirmed",
    timeout_ms: int = DEFAULT_CONFIRMATION_TIMEOUT_MS,
    poll_interval: Optional[float] = None,
) -> ConfirmationResult:
    """
    Poll signature status until the commitment is reached or time runs out

    Args:
        rpc: RPC client
        signature: Transaction signature (base58)
        commitment: Target commitment; a higher level also counts
        timeout_ms: Wall-clock limit in milliseconds
        poll_interval: Seconds between polls (default: config.tx.poll_interval)

    Returns:
        ConfirmationResult; error is CONFIRMATION_TIMEOUT on timeout, or the
        on-chain error if the transaction failed
    """
    interval = get_config().tx.poll_interval if poll_interval is None else poll_interval
    deadline = time.monotonic() + timeout_ms / 1000.0
    last_status = None

    while True:
        try:
            statuses = await rpc.get_signature_statuses([signature])
            status = statuses[0] if statuses else None
            if status:
                last_status = status
                if status.get("err"):
                    logger.warning(f"Transaction {signature} failed on-chain: {status.get('err')}")
                    return ConfirmationResult(success=False, error=status.get("err"), status=status)
                if _reached(status, commitment):
                    return ConfirmationResult(success=True, status=status)
        except SDKError as e:
            logger.debug(f"Error checking transaction status: {e}")

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        await asyncio.sleep(min(interval, remaining))

    if last_status is None:
        logger.warning(f"Transaction {signature} was never seen on chain (dropped/expired)")
    else:
        logger.warning(
            f"Transaction {signature} timeout. "
            f"Last status: {last_status.get('confirmationStatus', 'unknown')}"
        )
    return ConfirmationResult(success=False, error=CONFIRMATION_TIMEOUT, status=last_status)


async def submit_transaction(
    rpc: RpcClient,
    transaction: Transaction,
    options: Optional[SubmitOptions] = None,
    explorer_url: Optional[str] = None,
) -> SubmitResult:
    """
    Send a fully signed transaction and wait for confirmation

    Never raises; failures come back as SubmitResult(success=False).

    Args:
        rpc: RPC client
        transaction: Signed transaction
        options: Submission options (defaults from config.tx)
        explorer_url: Link template containing "{signature}"

    Returns:
        SubmitResult with the signature once the commitment is reached
    """
    options = options or SubmitOptions()
    tx_config = get_config().tx
    skip_preflight = tx_config.skip_preflight if options.skip_preflight is None else options.skip_preflight
    max_retries = tx_config.send_max_retries if options.max_retries is None else options.max_retries
    commitment = options.commitment or rpc.commitment
    timeout_seconds = (
        tx_config.confirmation_timeout if options.timeout_seconds is None else options.timeout_seconds
    )

    signature = ""
    try:
        signature = await rpc.send_transaction(
            bytes(transaction),
            skip_preflight=skip_preflight,
            preflight_commitment=commitment,
            max_retries=max_retries,
        )
        if not signature:
            raise TransactionError.send_failed("node returned no signature")
        logger.info(f"Sent transaction {signature}")

        confirmation = await wait_for_confirmation(
            rpc, signature, commitment, timeout_ms=int(timeout_seconds * 1000)
        )
        if not confirmation.success:
            if confirmation.is_timeout:
                raise TransactionError(CONFIRMATION_TIMEOUT, signature=signature, recoverable=True)
            raise TransactionError.rejected(signature, _error_text(confirmation.error))

        link = explorer_url.format(signature=signature) if explorer_url else None
        logger.info(f"Transaction {signature} reached {commitment}")
        return SubmitResult.ok(signature, explorer_url=link)

    except Exception as e:
        error = _error_text(e)
        logger.error(f"Transaction submission failed: {error}")
        return SubmitResult.failed(error, signature=signature)


async def submit_transactions(
    rpc: RpcClient,
    transactions: Sequence[Transaction],
    options: Optional[SubmitOptions] = None,
    explorer_url: Optional[str] = None,
) -> List[SubmitResult]:
    """
    Submit transactions one after another, stopping at the first failure

    Returns:
        Results for every transaction attempted (the last one failed if
        the list is shorter than the input)
    """
    results: List[SubmitResult] = []
    for index, transaction in enumerate(transactions):
        result = await submit_transaction(rpc, transaction, options, explorer_url=explorer_url)
        results.append(result)
        if not result.success:
            logger.warning(
                f"Batch stopped at transaction {index + 1}/{len(transactions)}: {result.error}"
            )
            break
    return results


async def simulate_transaction(
    rpc: RpcClient,
    transaction: Union[Transaction, UnsignedTransaction],
    commitment: Optional[str] = None,
) -> SimulationResult:
    """
    Dry-run a transaction against current chain state

    An UnsignedTransaction is simulated without signatures (and gets a
    blockhash if it has none yet). Never raises.

    Returns:
        SimulationResult with logs and compute units consumed
    """
    try:
        if isinstance(transaction, UnsignedTransaction):
            if transaction.recent_blockhash is None:
                await refresh_blockhash(rpc, transaction)
            message = transaction.compile()
            placeholders = [Signature.default()] * len(required_signers(message))
            transaction = Transaction.populate(message, placeholders)

        value = await rpc.simulate_transaction(bytes(transaction), commitment=commitment)
        logs = value.get("logs") or []
        units = value.get("unitsConsumed")
        if value.get("err"):
            logger.warning(f"Simulation failed: {value.get('err')}")
            return SimulationResult(success=False, logs=logs, units_consumed=units, error=value.get("err"))
        return SimulationResult(success=True, logs=logs, units_consumed=units)

    except Exception as e:
        logger.error(f"Simulation request failed: {e}")
        return SimulationResult(success=False, error=_error_text(e))


async def get_transaction_details(rpc: RpcClient, signature: str) -> TransactionDetails:
    """Look up a landed transaction at confirmed commitment. Never raises."""
    try:
        transaction = await rpc.get_transaction(signature, commitment="confirmed")
        if not transaction:
            return TransactionDetails(success=False, error="Transaction not found")
        return TransactionDetails(success=True, transaction=transaction)
    except Exception as e:
        return TransactionDetails(success=False, error=_error_text(e))
