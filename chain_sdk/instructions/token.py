"""
Token-2022 instruction builders

Covers what token and NFT creation needs: mint initialization with the
MetadataPointer extension, the token-metadata interface Initialize
instruction, associated token accounts, MintTo and TransferChecked.

The token program is always passed in, since Gorbchain runs its own
Token-2022 deployment.
"""

import hashlib
import math
import struct
from typing import Optional, Tuple

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM

# Token instruction indices
INITIALIZE_MINT = 0
MINT_TO = 7
TRANSFER_CHECKED = 12
METADATA_POINTER_EXTENSION = 39
METADATA_POINTER_INITIALIZE = 0

# Account layout sizes
MINT_SIZE = 82
BASE_ACCOUNT_SIZE = 165  # extended mints are padded to token-account size
ACCOUNT_TYPE_SIZE = 1
TLV_HEADER_SIZE = 4  # u16 type + u16 length
METADATA_POINTER_SIZE = 64  # authority + metadata address

# Mint account carrying only the MetadataPointer extension
MINT_WITH_METADATA_POINTER_SIZE = (
    BASE_ACCOUNT_SIZE + ACCOUNT_TYPE_SIZE + TLV_HEADER_SIZE + METADATA_POINTER_SIZE
)

# sha256("spl_token_metadata_interface:initialize_account")[:8]
TOKEN_METADATA_INITIALIZE_DISCRIMINATOR = hashlib.sha256(
    b"spl_token_metadata_interface:initialize_account"
).digest()[:8]

DEFAULT_METADATA_PADDING = 1.1

_NO_PUBKEY = bytes(32)


def metadata_space(name: str, symbol: str, uri: str, padding: float = DEFAULT_METADATA_PADDING) -> int:
    """
    Estimate the bytes the token metadata record adds to the mint.

    update_authority (32) + mint (32) + three length-prefixed strings +
    empty additional_metadata vec (4), plus the 4-byte TLV envelope,
    scaled by padding and rounded up.

    Args:
        name: Token name
        symbol: Token symbol
        uri: Metadata URI
        padding: Headroom factor over the raw size

    Returns:
        Size in bytes
    """
    borsh_size = (
        32
        + 32
        + 4 + len(name.encode("utf-8"))
        + 4 + len(symbol.encode("utf-8"))
        + 4 + len(uri.encode("utf-8"))
        + 4
    )
    tlv = 4
    return math.ceil((borsh_size + tlv) * padding)


def _borsh_string(value: str) -> bytes:
    encoded = value.encode("utf-8")
    return struct.pack("<I", len(encoded)) + encoded


def find_associated_token_address(
    owner: Pubkey,
    mint: Pubkey,
    token_program: Pubkey,
    associated_token_program: Pubkey,
) -> Tuple[Pubkey, int]:
    """
    Derive associated token account address and bump.

    Seeds: [owner, token_program, mint] under the associated token program.
    """
    seeds = [
        bytes(owner),
        bytes(token_program),
        bytes(mint),
    ]
    return Pubkey.find_program_address(seeds, associated_token_program)


def get_associated_token_address(
    owner: Pubkey,
    mint: Pubkey,
    token_program: Pubkey,
    associated_token_program: Pubkey,
) -> Pubkey:
    """Associated token account address for owner/mint"""
    address, _ = find_associated_token_address(owner, mint, token_program, associated_token_program)
    return address


def build_initialize_metadata_pointer_instruction(
    mint: Pubkey,
    authority: Optional[Pubkey],
    metadata_address: Optional[Pubkey],
    token_program: Pubkey,
) -> Instruction:
    """
    Build MetadataPointer::Initialize.

    Must run before InitializeMint. A zeroed key encodes "none".
    """
    data = bytearray()
    data.extend(struct.pack("<BB", METADATA_POINTER_EXTENSION, METADATA_POINTER_INITIALIZE))
    data.extend(bytes(authority) if authority else _NO_PUBKEY)
    data.extend(bytes(metadata_address) if metadata_address else _NO_PUBKEY)

    accounts = [
        AccountMeta(mint, is_signer=False, is_writable=True),
    ]
    return Instruction(token_program, bytes(data), accounts)


def build_initialize_mint_instruction(
    mint: Pubkey,
    decimals: int,
    mint_authority: Pubkey,
    freeze_authority: Optional[Pubkey],
    token_program: Pubkey,
    rent_sysvar: Pubkey,
) -> Instruction:
    """
    Build InitializeMint.

    Layout: u8 0 | u8 decimals | [32] mint_authority | u8 has_freeze | [32] freeze_authority
    """
    data = bytearray()
    data.extend(struct.pack("<BB", INITIALIZE_MINT, decimals))
    data.extend(bytes(mint_authority))
    if freeze_authority is not None:
        data.extend(struct.pack("<B", 1))
        data.extend(bytes(freeze_authority))
    else:
        data.extend(struct.pack("<B", 0))
        data.extend(_NO_PUBKEY)

    accounts = [
        AccountMeta(mint, is_signer=False, is_writable=True),
        AccountMeta(rent_sysvar, is_signer=False, is_writable=False),
    ]
    return Instruction(token_program, bytes(data), accounts)


def build_initialize_token_metadata_instruction(
    token_program: Pubkey,
    metadata: Pubkey,
    update_authority: Pubkey,
    mint: Pubkey,
    mint_authority: Pubkey,
    name: str,
    symbol: str,
    uri: str,
) -> Instruction:
    """
    Build token-metadata interface Initialize (metadata stored on the mint).

    The mint must already hold enough lamports for the grown account.
    """
    data = bytearray(TOKEN_METADATA_INITIALIZE_DISCRIMINATOR)
    data.extend(_borsh_string(name))
    data.extend(_borsh_string(symbol))
    data.extend(_borsh_string(uri))

    accounts = [
        AccountMeta(metadata, is_signer=False, is_writable=True),
        AccountMeta(update_authority, is_signer=False, is_writable=False),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(mint_authority, is_signer=True, is_writable=False),
    ]
    return Instruction(token_program, bytes(data), accounts)


def build_create_associated_token_account_instruction(
    payer: Pubkey,
    associated_token: Pubkey,
    owner: Pubkey,
    mint: Pubkey,
    token_program: Pubkey,
    associated_token_program: Pubkey,
    idempotent: bool = False,
) -> Instruction:
    """
    Build associated token account creation.

    The plain variant (empty data) fails if the account exists; the
    idempotent variant (data = [1]) is a no-op in that case.
    """
    accounts = [
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(associated_token, is_signer=False, is_writable=True),
        AccountMeta(owner, is_signer=False, is_writable=False),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(SYSTEM_PROGRAM, is_signer=False, is_writable=False),
        AccountMeta(token_program, is_signer=False, is_writable=False),
    ]
    data = bytes([1]) if idempotent else b""
    return Instruction(associated_token_program, data, accounts)


def build_mint_to_instruction(
    mint: Pubkey,
    destination: Pubkey,
    authority: Pubkey,
    amount: int,
    token_program: Pubkey,
) -> Instruction:
    """Build MintTo (u8 7 | u64 amount)"""
    data = struct.pack("<BQ", MINT_TO, amount)
    accounts = [
        AccountMeta(mint, is_signer=False, is_writable=True),
        AccountMeta(destination, is_signer=False, is_writable=True),
        AccountMeta(authority, is_signer=True, is_writable=False),
    ]
    return Instruction(token_program, data, accounts)


def build_transfer_checked_instruction(
    source: Pubkey,
    mint: Pubkey,
    destination: Pubkey,
    owner: Pubkey,
    amount: int,
    decimals: int,
    token_program: Pubkey,
) -> Instruction:
    """Build TransferChecked (u8 12 | u64 amount | u8 decimals)"""
    data = struct.pack("<BQB", TRANSFER_CHECKED, amount, decimals)
    accounts = [
        AccountMeta(source, is_signer=False, is_writable=True),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(destination, is_signer=False, is_writable=True),
        AccountMeta(owner, is_signer=True, is_writable=False),
    ]
    return Instruction(token_program, data, accounts)
