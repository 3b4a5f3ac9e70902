"""
Test Instructions Module

Byte layouts and account lists of the system, Token-2022, associated token
and AMM instruction builders.
"""

import dataclasses
import hashlib
import struct
import sys
from pathlib import Path

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from solders import system_program
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.sysvar import RENT

from chain_sdk.constants import GORBCHAIN_CONFIG, NATIVE_MINT, SYSTEM_PROGRAM_ID
from chain_sdk.errors import ErrorCode, ValidationError
from chain_sdk.instructions import (
    MINT_WITH_METADATA_POINTER_SIZE,
    PoolAccounts,
    SwapAccounts,
    build_add_liquidity_instruction,
    build_create_account_instruction,
    build_create_associated_token_account_instruction,
    build_init_pool_instruction,
    build_initialize_metadata_pointer_instruction,
    build_initialize_mint_instruction,
    build_initialize_token_metadata_instruction,
    build_mint_to_instruction,
    build_swap_instruction,
    build_transfer_checked_instruction,
    build_transfer_instruction,
    canonical_pair,
    derive_lp_mint_address,
    derive_pool_address,
    derive_vault_address,
    get_associated_token_address,
    metadata_space,
    native_first,
    user_token_account,
)

NATIVE = Pubkey.from_string(NATIVE_MINT)


def new_key() -> Pubkey:
    return Keypair().pubkey()


class TestSystemInstructions:

    def test_create_account_layout(self):
        payer, mint, owner = new_key(), new_key(), new_key()
        ix = build_create_account_instruction(payer, mint, 2_500_000, 234, owner)

        assert ix.program_id == Pubkey.from_string(SYSTEM_PROGRAM_ID)
        assert len(ix.data) == 4 + 8 + 8 + 32
        assert struct.unpack("<IQQ", ix.data[:20]) == (0, 2_500_000, 234)
        assert ix.data[20:] == bytes(owner)
        assert [a.is_signer for a in ix.accounts] == [True, True]

    def test_transfer_layout(self):
        sender, recipient = new_key(), new_key()
        ix = build_transfer_instruction(sender, recipient, 100_000_000)

        assert struct.unpack("<IQ", ix.data) == (2, 100_000_000)
        assert ix.accounts[0].pubkey == sender
        assert ix.accounts[0].is_signer
        assert not ix.accounts[1].is_signer
        assert ix.accounts[1].is_writable

    def test_matches_solders_system_program(self):
        payer, target = new_key(), new_key()

        assert build_transfer_instruction(payer, target, 5) == system_program.transfer(
            system_program.TransferParams(from_pubkey=payer, to_pubkey=target, lamports=5)
        )
        assert build_create_account_instruction(
            payer, target, 7, 234, GORBCHAIN_CONFIG.token_program
        ) == system_program.create_account(
            system_program.CreateAccountParams(
                from_pubkey=payer,
                to_pubkey=target,
                lamports=7,
                space=234,
                owner=GORBCHAIN_CONFIG.token_program,
            )
        )

    def test_presets_use_solders_ids(self):
        assert GORBCHAIN_CONFIG.system_program == system_program.ID
        assert GORBCHAIN_CONFIG.rent_sysvar == RENT


class TestTokenInstructions:

    def test_mint_size_with_metadata_pointer(self):
        assert MINT_WITH_METADATA_POINTER_SIZE == 234

    def test_metadata_space_deterministic(self):
        first = metadata_space("Demo", "DMO", "https://example.com/demo.json")
        second = metadata_space("Demo", "DMO", "https://example.com/demo.json")
        longer = metadata_space("Demo", "DMO", "https://example.com/a-much-longer-demo.json")

        assert first == second
        assert longer > first

    def test_metadata_space_without_padding(self):
        # 32 + 32 + (4 + 4) + (4 + 3) + (4 + 19) + 4, plus 4-byte TLV
        assert metadata_space("Demo", "DMO", "https://x.io/m.json", padding=1.0) == 110

    def test_metadata_space_counts_utf8_bytes(self):
        ascii_space = metadata_space("A", "A", "", padding=1.0)
        wide_space = metadata_space("é", "A", "", padding=1.0)
        assert wide_space == ascii_space + 1

    def test_metadata_pointer_layout(self):
        mint, authority = new_key(), new_key()
        program = GORBCHAIN_CONFIG.token_program
        ix = build_initialize_metadata_pointer_instruction(mint, authority, mint, program)

        assert ix.program_id == program
        assert ix.data[:2] == bytes([39, 0])
        assert ix.data[2:34] == bytes(authority)
        assert ix.data[34:66] == bytes(mint)
        assert len(ix.accounts) == 1

    def test_initialize_mint_layout(self):
        mint, authority, freeze = new_key(), new_key(), new_key()
        chain = GORBCHAIN_CONFIG

        ix = build_initialize_mint_instruction(mint, 6, authority, freeze, chain.token_program, chain.rent_sysvar)
        assert ix.data[:2] == bytes([0, 6])
        assert ix.data[2:34] == bytes(authority)
        assert ix.data[34] == 1
        assert ix.data[35:67] == bytes(freeze)

        ix = build_initialize_mint_instruction(mint, 0, authority, None, chain.token_program, chain.rent_sysvar)
        assert ix.data[34] == 0
        assert ix.data[35:67] == bytes(32)
        assert ix.accounts[1].pubkey == chain.rent_sysvar

    def test_token_metadata_layout(self):
        mint, authority = new_key(), new_key()
        ix = build_initialize_token_metadata_instruction(
            GORBCHAIN_CONFIG.token_program, mint, authority, mint, authority, "Demo", "DMO", "u"
        )

        discriminator = hashlib.sha256(b"spl_token_metadata_interface:initialize_account").digest()[:8]
        assert ix.data[:8] == discriminator
        assert ix.data[8:] == (
            struct.pack("<I", 4) + b"Demo" + struct.pack("<I", 3) + b"DMO" + struct.pack("<I", 1) + b"u"
        )
        assert [a.is_signer for a in ix.accounts] == [False, False, False, True]

    def test_associated_token_address(self):
        owner, mint = new_key(), new_key()
        chain = GORBCHAIN_CONFIG

        ata = get_associated_token_address(owner, mint, chain.token_program, chain.associated_token_program)
        expected, _ = Pubkey.find_program_address(
            [bytes(owner), bytes(chain.token_program), bytes(mint)],
            chain.associated_token_program,
        )
        assert ata == expected

    def test_create_ata_variants(self):
        payer, ata, mint = new_key(), new_key(), new_key()
        chain = GORBCHAIN_CONFIG

        plain = build_create_associated_token_account_instruction(
            payer, ata, payer, mint, chain.token_program, chain.associated_token_program
        )
        idempotent = build_create_associated_token_account_instruction(
            payer, ata, payer, mint, chain.token_program, chain.associated_token_program, idempotent=True
        )

        assert plain.data == b""
        assert idempotent.data == bytes([1])
        assert len(plain.accounts) == 6
        assert plain.program_id == chain.associated_token_program

    def test_mint_to_and_transfer_checked(self):
        mint, ata, owner, dest = new_key(), new_key(), new_key(), new_key()
        program = GORBCHAIN_CONFIG.token_program

        mint_to = build_mint_to_instruction(mint, ata, owner, 1_000_000, program)
        assert struct.unpack("<BQ", mint_to.data) == (7, 1_000_000)

        transfer = build_transfer_checked_instruction(ata, mint, dest, owner, 42, 6, program)
        assert struct.unpack("<BQB", transfer.data) == (12, 42, 6)
        assert transfer.accounts[3].is_signer


class TestPairOrdering:

    def test_native_first_moves_native_to_a(self):
        token = new_key()
        assert native_first(token, NATIVE, NATIVE) == (NATIVE, token, True)
        assert native_first(NATIVE, token, NATIVE) == (NATIVE, token, False)

    def test_native_first_keeps_order_otherwise(self):
        x, y = new_key(), new_key()
        assert native_first(x, y, NATIVE) == (x, y, False)
        assert native_first(y, x, NATIVE) == (y, x, False)

    def test_native_on_both_sides_rejected(self):
        for ordering in (native_first, canonical_pair):
            with pytest.raises(ValidationError) as exc_info:
                ordering(NATIVE, NATIVE, NATIVE)
            assert exc_info.value.code == ErrorCode.INVALID_TOKEN_PAIR

    def test_canonical_pair_is_symmetric(self):
        x, y = new_key(), new_key()
        a1, b1, _ = canonical_pair(x, y, NATIVE)
        a2, b2, _ = canonical_pair(y, x, NATIVE)

        assert (a1, b1) == (a2, b2)
        assert bytes(a1) < bytes(b1)

    def test_canonical_pair_native_first(self):
        token = new_key()
        assert canonical_pair(token, NATIVE, NATIVE)[:2] == (NATIVE, token)

    def test_same_token_rejected(self):
        token = new_key()
        for ordering in (native_first, canonical_pair):
            with pytest.raises(ValidationError) as exc_info:
                ordering(token, token, NATIVE)
            assert exc_info.value.code == ErrorCode.INVALID_TOKEN_PAIR


def swap_accounts(user=None):
    chain = GORBCHAIN_CONFIG
    token_a, token_b = new_key(), new_key()
    user = user or new_key()
    pool = derive_pool_address(chain, token_a, token_b)
    return SwapAccounts(
        pool=pool,
        token_a=token_a,
        token_b=token_b,
        vault_a=derive_vault_address(chain, pool, token_a, False),
        vault_b=derive_vault_address(chain, pool, token_b, False),
        user_source=user_token_account(chain, user, token_a),
        user_destination=user_token_account(chain, user, token_b),
        user=user,
    )


def pool_accounts(is_native_pool: bool):
    chain = GORBCHAIN_CONFIG
    token_a = NATIVE if is_native_pool else new_key()
    token_b = new_key()
    user = new_key()
    pool = derive_pool_address(chain, token_a, token_b)
    lp_mint = derive_lp_mint_address(chain, pool, is_native_pool)
    return PoolAccounts(
        pool=pool,
        token_a=token_a,
        token_b=token_b,
        vault_a=derive_vault_address(chain, pool, token_a, is_native_pool),
        vault_b=derive_vault_address(chain, pool, token_b, is_native_pool),
        lp_mint=lp_mint,
        user=user,
        user_token_a=user_token_account(chain, user, token_a),
        user_token_b=user_token_account(chain, user, token_b),
        user_lp=user_token_account(chain, user, lp_mint),
        is_native_pool=is_native_pool,
    )


class TestAmmInstructions:

    def test_pool_address_derivation(self):
        chain = GORBCHAIN_CONFIG
        a, b = new_key(), new_key()
        expected, _ = Pubkey.find_program_address([b"pool", bytes(a), bytes(b)], chain.amm.program_id)

        assert derive_pool_address(chain, a, b) == expected
        assert derive_pool_address(chain, b, a) != expected

    def test_vault_seed_depends_on_pool_kind(self):
        chain = GORBCHAIN_CONFIG
        pool, mint = new_key(), new_key()
        normal, _ = Pubkey.find_program_address([b"vault", bytes(pool), bytes(mint)], chain.amm.program_id)
        native, _ = Pubkey.find_program_address(
            [b"native_sol_vault", bytes(pool), bytes(mint)], chain.amm.program_id
        )

        assert derive_vault_address(chain, pool, mint, False) == normal
        assert derive_vault_address(chain, pool, mint, True) == native

    def test_user_token_account_native_is_wallet(self):
        user = new_key()
        assert user_token_account(GORBCHAIN_CONFIG, user, NATIVE) == user
        assert user_token_account(GORBCHAIN_CONFIG, user, new_key()) != user

    def test_swap_has_twelve_accounts(self):
        accounts = swap_accounts()
        ix = build_swap_instruction(GORBCHAIN_CONFIG, accounts, 1_000, True)

        assert len(ix.accounts) == 12
        assert ix.program_id == GORBCHAIN_CONFIG.amm.program_id
        assert struct.unpack("<BQB", ix.data) == (3, 1_000, 1)
        signers = [a.pubkey for a in ix.accounts if a.is_signer]
        assert signers == [accounts.user]

    def test_swap_direction_flag(self):
        ix = build_swap_instruction(GORBCHAIN_CONFIG, swap_accounts(), 5, False)
        assert ix.data[9] == 0

    def test_swap_account_count_mismatch(self):
        amm = dataclasses.replace(GORBCHAIN_CONFIG.amm, swap_account_count=11)
        chain = dataclasses.replace(GORBCHAIN_CONFIG, amm=amm)

        with pytest.raises(ValidationError) as exc_info:
            build_swap_instruction(chain, swap_accounts(), 1_000, True)

        assert exc_info.value.code == ErrorCode.INVALID_ACCOUNT_LAYOUT
        assert "Expected 11, got 12" in exc_info.value.message

    def test_init_pool_layout(self):
        accounts = pool_accounts(is_native_pool=False)
        ix = build_init_pool_instruction(GORBCHAIN_CONFIG, accounts, 10, 20)

        assert struct.unpack("<BQQ", ix.data) == (0, 10, 20)
        assert len(ix.accounts) == 14
        user_meta = ix.accounts[6]
        assert user_meta.pubkey == accounts.user
        assert user_meta.is_signer
        assert not user_meta.is_writable

    def test_native_pool_layout(self):
        accounts = pool_accounts(is_native_pool=True)
        ix = build_add_liquidity_instruction(GORBCHAIN_CONFIG, accounts, 10, 20)

        assert struct.unpack("<BQQ", ix.data) == (1, 10, 20)
        assert len(ix.accounts) == 15
        assert ix.accounts[6].is_writable
        assert ix.accounts[-1].pubkey == GORBCHAIN_CONFIG.system_program
        # Native side pays straight from the wallet
        assert accounts.user_token_a == accounts.user


if __name__ == "__main__":
    # Run with pytest
    exit_code = pytest.main([__file__, "-v", "--tb=short"])
    sys.exit(exit_code)
