"""
Unsigned transaction container

Builders return an UnsignedTransaction: the ordered instructions plus a fee
payer. The recent blockhash stays empty until a signing function fetches a
fresh one, so the validity window starts at signing time, not build time.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey

from ..errors import TransactionError


@dataclass
class UnsignedTransaction:
    """
    Ordered instructions awaiting signatures

    Attributes:
        instructions: Instructions in execution order
        fee_payer: Account paying the fee (first required signer)
        recent_blockhash: Set during signing
        last_valid_block_height: Set together with the blockhash
        extra_signers: Keypairs the builder created and that must co-sign
            (e.g. a freshly generated mint account)
    """
    instructions: List[Instruction] = field(default_factory=list)
    fee_payer: Optional[Pubkey] = None
    recent_blockhash: Optional[Hash] = None
    last_valid_block_height: Optional[int] = None
    extra_signers: List[Keypair] = field(default_factory=list)

    def add(self, *instructions: Instruction) -> "UnsignedTransaction":
        self.instructions.extend(instructions)
        return self

    def set_blockhash(self, blockhash: str, last_valid_block_height: Optional[int] = None):
        self.recent_blockhash = Hash.from_string(blockhash)
        self.last_valid_block_height = last_valid_block_height

    def compile(self) -> Message:
        """
        Compile to a legacy message

        Raises:
            TransactionError: If no blockhash has been set yet
        """
        if self.recent_blockhash is None:
            raise TransactionError.missing_blockhash()
        return Message.new_with_blockhash(
            self.instructions,
            self.fee_payer,
            self.recent_blockhash,
        )

    def required_signers(self) -> List[Pubkey]:
        """Public keys whose signatures the compiled message requires"""
        # Signer set does not depend on the blockhash
        message = Message.new_with_blockhash(
            self.instructions,
            self.fee_payer,
            self.recent_blockhash or Hash.default(),
        )
        count = message.header.num_required_signatures
        return list(message.account_keys[:count])
