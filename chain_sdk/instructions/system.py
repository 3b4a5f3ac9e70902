"""
System program instruction builders

Thin wrappers over solders.system_program keeping the builders' keyword style.
"""

from solders.instruction import Instruction
from solders.pubkey import Pubkey
from solders.system_program import (
    CreateAccountParams,
    TransferParams,
    create_account,
    transfer,
)


def build_create_account_instruction(
    from_pubkey: Pubkey,
    new_account: Pubkey,
    lamports: int,
    space: int,
    owner: Pubkey,
) -> Instruction:
    """
    Build system CreateAccount instruction.

    Both the funding account and the new account must sign.

    Args:
        from_pubkey: Funding account
        new_account: Account to create
        lamports: Initial balance (rent-exempt minimum)
        space: Allocated data size in bytes
        owner: Program that will own the account

    Returns:
        CreateAccount instruction
    """
    return create_account(
        CreateAccountParams(
            from_pubkey=from_pubkey,
            to_pubkey=new_account,
            lamports=lamports,
            space=space,
            owner=owner,
        )
    )


def build_transfer_instruction(
    from_pubkey: Pubkey,
    to_pubkey: Pubkey,
    lamports: int,
) -> Instruction:
    """Build system Transfer instruction moving lamports from a signer"""
    return transfer(
        TransferParams(
            from_pubkey=from_pubkey,
            to_pubkey=to_pubkey,
            lamports=lamports,
        )
    )
