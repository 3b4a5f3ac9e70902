"""
Transaction signing abstractions

Two signer variants, picked explicitly by the caller:
- LocalSigner: holds a keypair and signs synchronously
- RemoteSigner: wraps a wallet reached through an async sign callback
"""

from __future__ import annotations

import inspect
import json
import logging
import os
from typing import Any, List, Optional, Protocol, Union, runtime_checkable

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction

from ..errors import ErrorCode, SigningError, ConfigurationError
from ..config import get_config

logger = logging.getLogger(__name__)

SECRET_KEY_LENGTH = 64


@runtime_checkable
class Signer(Protocol):
    """
    Protocol for transaction signers

    Implementations must provide:
    - pubkey: The signer's public key
    """

    @property
    def pubkey(self) -> Pubkey:
        ...


@runtime_checkable
class Wallet(Protocol):
    """
    Wallet reached through async callbacks

    sign_transaction receives a solders Transaction (possibly already
    carrying local signatures) and returns it with the wallet's signature.
    sign_all_transactions is optional.
    """
    public_key: Pubkey

    async def sign_transaction(self, transaction: Transaction) -> Transaction:
        ...


def validate_keypair(keypair: Any) -> bool:
    """
    Structural check: a solders Keypair with a 64-byte secret and a
    non-default public key. Never signs anything.
    """
    if not isinstance(keypair, Keypair):
        return False
    if len(bytes(keypair)) != SECRET_KEY_LENGTH:
        return False
    return keypair.pubkey() != Pubkey.default()


def validate_wallet(wallet: Any) -> bool:
    """Structural check: a public key plus a callable sign_transaction"""
    if wallet is None:
        return False
    public_key = getattr(wallet, "public_key", None)
    if not isinstance(public_key, Pubkey) or public_key == Pubkey.default():
        return False
    return callable(getattr(wallet, "sign_transaction", None))


class LocalSigner:
    """
    Local signer using a solders keypair

    Usage:
        signer = LocalSigner(Keypair())
        signer = LocalSigner.from_file("~/.config/solana/id.json")
    """

    def __init__(self, keypair: Keypair):
        """
        Initialize with keypair

        Args:
            keypair: solders.keypair.Keypair instance

        Raises:
            SigningError: If the keypair is structurally invalid
        """
        if not validate_keypair(keypair):
            raise SigningError("Invalid keypair provided", ErrorCode.INVALID_SIGNER)
        self._keypair = keypair

    @property
    def pubkey(self) -> Pubkey:
        return self._keypair.pubkey()

    @property
    def keypair(self) -> Keypair:
        return self._keypair

    def sign(self, message: bytes) -> Signature:
        """Sign message bytes"""
        return self._keypair.sign_message(message)

    @classmethod
    def from_bytes(cls, secret_key: bytes) -> "LocalSigner":
        """Create signer from secret key bytes (64 bytes)"""
        if len(secret_key) != SECRET_KEY_LENGTH:
            raise SigningError(
                f"Secret key must be {SECRET_KEY_LENGTH} bytes, got {len(secret_key)}",
                ErrorCode.INVALID_SIGNER,
            )
        try:
            keypair = Keypair.from_bytes(secret_key)
        except ValueError as e:
            raise SigningError(f"Invalid secret key: {e}", ErrorCode.INVALID_SIGNER, original_error=e)
        return cls(keypair)

    @classmethod
    def from_base58(cls, secret_key: str) -> "LocalSigner":
        """Create signer from base58 secret key"""
        try:
            secret_bytes = base58.b58decode(secret_key)
        except ValueError as e:
            raise SigningError(f"Invalid base58 secret key: {e}", ErrorCode.INVALID_SIGNER, original_error=e)
        return cls.from_bytes(secret_bytes)

    @classmethod
    def from_file(cls, path: str) -> "LocalSigner":
        """
        Create signer from keypair file

        Supports:
        - JSON array format (Solana CLI): [1,2,3,...]
        - Raw bytes file (64 bytes)
        """
        with open(os.path.expanduser(path), "rb") as f:
            content = f.read()

        try:
            data = json.loads(content.decode("utf-8"))
            if isinstance(data, list):
                return cls.from_bytes(bytes(data))
        except (json.JSONDecodeError, UnicodeDecodeError):
            pass

        if len(content) == SECRET_KEY_LENGTH:
            return cls.from_bytes(content)

        raise ConfigurationError.invalid("keypair_file", f"Cannot parse keypair file: {path}")

    def __repr__(self) -> str:
        return f"LocalSigner({self.pubkey})"


class RemoteSigner:
    """
    Signer backed by a wallet's async callbacks

    Usage:
        signer = RemoteSigner(wallet)
        signed = await signer.sign_transaction(tx)
    """

    def __init__(self, wallet: Wallet):
        """
        Raises:
            SigningError: If the wallet lacks a public key or sign_transaction
        """
        if not validate_wallet(wallet):
            raise SigningError("Invalid wallet provided", ErrorCode.INVALID_SIGNER)
        self._wallet = wallet

    @property
    def pubkey(self) -> Pubkey:
        return self._wallet.public_key

    @property
    def wallet(self) -> Wallet:
        return self._wallet

    @property
    def supports_sign_all(self) -> bool:
        return callable(getattr(self._wallet, "sign_all_transactions", None))

    async def sign_transaction(self, transaction: Transaction) -> Transaction:
        result = self._wallet.sign_transaction(transaction)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def sign_all_transactions(self, transactions: List[Transaction]) -> List[Transaction]:
        if not self.supports_sign_all:
            raise SigningError.failed("Wallet does not support sign_all_transactions")
        result = self._wallet.sign_all_transactions(transactions)
        if inspect.isawaitable(result):
            result = await result
        return list(result)

    def __repr__(self) -> str:
        return f"RemoteSigner({self.pubkey})"


def as_local_signer(keypair: Union[Keypair, LocalSigner]) -> LocalSigner:
    if isinstance(keypair, LocalSigner):
        return keypair
    return LocalSigner(keypair)


def as_remote_signer(wallet: Union[Wallet, RemoteSigner]) -> RemoteSigner:
    if isinstance(wallet, RemoteSigner):
        return wallet
    return RemoteSigner(wallet)


def create_signer(
    keypair: Optional[Keypair] = None,
    keypair_path: Optional[str] = None,
) -> LocalSigner:
    """
    Create a local signer from configuration

    Priority:
    1. keypair: Use LocalSigner with provided keypair
    2. keypair_path: Load keypair from file
    3. Environment: CHAIN_KEYPAIR_PATH

    Raises:
        SigningError: If no valid signer configuration found
    """
    if keypair is not None:
        return LocalSigner(keypair)

    if keypair_path is not None:
        return LocalSigner.from_file(keypair_path)

    path = get_config().signer.keypair_path
    if path and os.path.isfile(os.path.expanduser(path)):
        logger.debug(f"Loading keypair from {path}")
        return LocalSigner.from_file(path)

    raise SigningError.not_configured()
