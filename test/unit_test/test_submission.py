"""
Test Submission Module

Send, confirm, simulate and look up transactions against an in-memory RPC.
"""

import asyncio
import sys
from pathlib import Path

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from solders.keypair import Keypair

from chain_sdk.builders import create_native_transfer_transaction
from chain_sdk.constants import GORBCHAIN_CONFIG
from chain_sdk.infra import (
    get_transaction_details,
    sign_with_keypair,
    simulate_transaction,
    submit_transaction,
    submit_transactions,
    wait_for_confirmation,
)
from chain_sdk.types import CONFIRMATION_TIMEOUT, SubmitOptions, TransferSOLParams

from fake_rpc import FakeRpc, failing_rpc_error

CHAIN = GORBCHAIN_CONFIG

CONFIRMED = {"slot": 10, "confirmations": 1, "err": None, "confirmationStatus": "confirmed"}
PROCESSED = {"slot": 10, "confirmations": 0, "err": None, "confirmationStatus": "processed"}
FINALIZED = {"slot": 10, "confirmations": None, "err": None, "confirmationStatus": "finalized"}
FAILED = {"slot": 10, "confirmations": 1, "err": {"InstructionError": [0, {"Custom": 1}]},
          "confirmationStatus": "confirmed"}

FAST = SubmitOptions(timeout_seconds=0.2)


def build_transfer():
    return create_native_transfer_transaction(
        CHAIN,
        TransferSOLParams(from_pubkey=Keypair().pubkey(), to_pubkey=Keypair().pubkey(), amount_sol="0.5"),
    ).transaction


def signed_transfer(rpc):
    keypair = Keypair()
    tx = create_native_transfer_transaction(
        CHAIN,
        TransferSOLParams(from_pubkey=keypair.pubkey(), to_pubkey=Keypair().pubkey(), amount_sol="0.5"),
    ).transaction
    return asyncio.run(sign_with_keypair(rpc, tx, keypair))


class TestWaitForConfirmation:

    def test_confirmed(self):
        rpc = FakeRpc(statuses=[CONFIRMED])
        result = asyncio.run(wait_for_confirmation(rpc, "sig", "confirmed", timeout_ms=1000, poll_interval=0.01))

        assert result.success
        assert result.status == CONFIRMED

    def test_polls_until_commitment(self):
        rpc = FakeRpc(statuses=[None, PROCESSED, CONFIRMED])
        result = asyncio.run(wait_for_confirmation(rpc, "sig", "confirmed", timeout_ms=2000, poll_interval=0.01))

        assert result.success
        assert rpc.calls.count("get_signature_statuses") == 3

    def test_higher_commitment_counts(self):
        rpc = FakeRpc(statuses=[FINALIZED])
        result = asyncio.run(wait_for_confirmation(rpc, "sig", "confirmed", timeout_ms=1000, poll_interval=0.01))

        assert result.success

    def test_processed_not_enough_for_finalized(self):
        rpc = FakeRpc(statuses=[PROCESSED])
        result = asyncio.run(wait_for_confirmation(rpc, "sig", "finalized", timeout_ms=100, poll_interval=0.02))

        assert not result.success
        assert result.is_timeout
        assert result.status == PROCESSED

    def test_timeout_when_never_seen(self):
        rpc = FakeRpc()
        result = asyncio.run(wait_for_confirmation(rpc, "sig", "confirmed", timeout_ms=100, poll_interval=0.02))

        assert not result.success
        assert result.error == CONFIRMATION_TIMEOUT
        assert result.status is None

    def test_on_chain_error_returns_immediately(self):
        rpc = FakeRpc(statuses=[FAILED])
        result = asyncio.run(wait_for_confirmation(rpc, "sig", "confirmed", timeout_ms=5000, poll_interval=0.01))

        assert not result.success
        assert result.error == FAILED["err"]
        assert rpc.calls.count("get_signature_statuses") == 1

    def test_rpc_errors_keep_polling(self):
        rpc = FakeRpc(statuses=[failing_rpc_error(), CONFIRMED])
        result = asyncio.run(wait_for_confirmation(rpc, "sig", "confirmed", timeout_ms=2000, poll_interval=0.01))

        assert result.success


class TestSubmitTransaction:

    def test_success(self):
        rpc = FakeRpc(statuses=[CONFIRMED])
        signed = signed_transfer(rpc)

        result = asyncio.run(submit_transaction(rpc, signed, FAST))

        assert result.success
        assert result.signature == str(signed.signatures[0])
        assert result.error is None
        assert result.explorer_url is None
        assert rpc.sent[0] == signed

    def test_explorer_link(self):
        rpc = FakeRpc(statuses=[CONFIRMED])
        signed = signed_transfer(rpc)

        result = asyncio.run(
            submit_transaction(rpc, signed, FAST, explorer_url="https://explorer.example/tx/{signature}")
        )

        assert result.explorer_url == f"https://explorer.example/tx/{result.signature}"

    def test_options_reach_rpc(self):
        rpc = FakeRpc(statuses=[FINALIZED])
        signed = signed_transfer(rpc)

        options = SubmitOptions(skip_preflight=True, max_retries=7, commitment="finalized", timeout_seconds=0.2)
        asyncio.run(submit_transaction(rpc, signed, options))

        assert rpc.send_options == [
            {"skip_preflight": True, "preflight_commitment": "finalized", "max_retries": 7}
        ]

    def test_on_chain_failure(self):
        rpc = FakeRpc(statuses=[FAILED])
        signed = signed_transfer(rpc)

        result = asyncio.run(submit_transaction(rpc, signed, FAST))

        assert not result.success
        assert result.signature == str(signed.signatures[0])
        assert "InstructionError" in result.error

    def test_send_failure(self):
        rpc = FakeRpc(send_error=failing_rpc_error("Blockhash not found"))
        signed = signed_transfer(rpc)

        result = asyncio.run(submit_transaction(rpc, signed, FAST))

        assert not result.success
        assert result.signature == ""
        assert result.error == "Blockhash not found"

    def test_confirmation_timeout(self):
        rpc = FakeRpc()
        signed = signed_transfer(rpc)

        result = asyncio.run(submit_transaction(rpc, signed, SubmitOptions(timeout_seconds=0.05)))

        assert not result.success
        assert result.error == CONFIRMATION_TIMEOUT
        assert result.signature == str(signed.signatures[0])

    def test_batch_stops_at_first_failure(self):
        rpc = FakeRpc(statuses=[FAILED])
        transactions = [signed_transfer(rpc) for _ in range(3)]

        results = asyncio.run(submit_transactions(rpc, transactions, FAST))

        assert len(results) == 1
        assert not results[0].success
        assert len(rpc.sent) == 1

    def test_batch_all_success(self):
        rpc = FakeRpc(statuses=[CONFIRMED])
        transactions = [signed_transfer(rpc) for _ in range(3)]

        results = asyncio.run(submit_transactions(rpc, transactions, FAST))

        assert [r.success for r in results] == [True, True, True]
        assert len({r.signature for r in results}) == 3


class TestSimulation:

    def test_signed_success(self):
        rpc = FakeRpc(simulation={"err": None, "logs": ["Program log: ok"], "unitsConsumed": 150})
        signed = signed_transfer(rpc)

        result = asyncio.run(simulate_transaction(rpc, signed))

        assert result.success
        assert result.logs == ["Program log: ok"]
        assert result.units_consumed == 150

    def test_unsigned_gets_blockhash(self):
        rpc = FakeRpc()
        tx = build_transfer()

        result = asyncio.run(simulate_transaction(rpc, tx))

        assert result.success
        assert tx.recent_blockhash is not None
        assert rpc.calls == ["get_latest_blockhash", "simulate_transaction"]

    def test_failure(self):
        rpc = FakeRpc(simulation={"err": "InsufficientFundsForFee", "logs": [], "unitsConsumed": 0})
        result = asyncio.run(simulate_transaction(rpc, build_transfer()))

        assert not result.success
        assert result.error == "InsufficientFundsForFee"

    def test_request_failure_never_raises(self):
        class BrokenRpc(FakeRpc):
            async def simulate_transaction(self, transaction, commitment=None, sig_verify=False):
                raise failing_rpc_error()

        result = asyncio.run(simulate_transaction(BrokenRpc(), build_transfer()))

        assert not result.success
        assert result.error == "node unavailable"


class TestTransactionDetails:

    def test_found(self):
        rpc = FakeRpc(transactions={"sig": {"slot": 5, "meta": {"err": None}}})
        result = asyncio.run(get_transaction_details(rpc, "sig"))

        assert result.success
        assert result.transaction["slot"] == 5

    def test_not_found(self):
        result = asyncio.run(get_transaction_details(FakeRpc(), "missing"))

        assert not result.success
        assert result.error == "Transaction not found"


if __name__ == "__main__":
    # Run with pytest
    exit_code = pytest.main([__file__, "-v", "--tb=short"])
    sys.exit(exit_code)
