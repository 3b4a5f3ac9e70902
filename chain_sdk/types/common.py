"""
Common type definitions
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR, InvalidOperation
from typing import Union

from solders.pubkey import Pubkey

from ..errors import ValidationError

LAMPORTS_PER_SOL = 1_000_000_000
SOL_DECIMALS = 9

Amount = Union[Decimal, float, int, str]


@dataclass(frozen=True)
class TokenInfo:
    """
    Token information used by swap and liquidity builders

    Attributes:
        address: Token mint address (base58)
        symbol: Token symbol (e.g., "GORB", "USDC")
        decimals: Number of decimal places
        name: Full token name (optional)
    """
    address: str
    symbol: str
    decimals: int
    name: str = ""

    def __str__(self) -> str:
        return self.symbol

    def __repr__(self) -> str:
        return f"TokenInfo({self.symbol}, {self.address[:8]}...)"


@dataclass(frozen=True)
class Pool:
    """
    Existing AMM pool

    Attributes:
        address: Pool account address (base58)
        token_a: Token stored in the pool's A slot
        token_b: Token stored in the pool's B slot
    """
    address: str
    token_a: TokenInfo
    token_b: TokenInfo


def to_decimal(amount: Amount, field: str) -> Decimal:
    """Convert a UI amount to Decimal without float artefacts"""
    if isinstance(amount, bool):
        raise ValidationError(f"Invalid {field}: {amount!r}", field=field)
    if isinstance(amount, Decimal):
        return amount
    try:
        return Decimal(str(amount))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid {field}: {amount!r}", field=field)


def require_positive(amount: Amount, field: str) -> Decimal:
    """Reject zero, negative and non-finite amounts"""
    value = to_decimal(amount, field)
    if not value.is_finite() or value <= 0:
        raise ValidationError.non_positive(field, amount)
    return value


def to_raw_amount(amount: Amount, decimals: int) -> int:
    """
    Convert UI amount to raw smallest units

    floor(amount * 10**decimals), computed in Decimal so 0.1 SOL is exactly
    100_000_000 lamports.
    """
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    scaled = amount * (Decimal(10) ** decimals)
    return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


def sol_to_lamports(amount_sol: Amount) -> int:
    """Convert SOL-denominated amount to lamports (floor)"""
    return to_raw_amount(amount_sol, SOL_DECIMALS)


def to_pubkey(value: Union[str, Pubkey, None], field: str) -> Pubkey:
    """
    Parse a base58 address

    Raises:
        ValidationError: If the value is empty or not a valid public key
    """
    if isinstance(value, Pubkey):
        return value
    if not value:
        raise ValidationError.invalid_address(field, value, "empty")
    try:
        return Pubkey.from_string(value)
    except (ValueError, TypeError) as e:
        raise ValidationError.invalid_address(field, value, str(e))


U64_MAX = 2 ** 64 - 1


def require_u64(value: int, field: str) -> int:
    """Reject raw amounts that do not fit the u64 wire fields"""
    if value < 0 or value > U64_MAX:
        raise ValidationError(f"Invalid {field}: {value} does not fit in u64", field=field)
    return value


def to_int(value, field: str, minimum: int = 0, maximum: int = U64_MAX) -> int:
    """Parse an integer parameter given as int or numeric string"""
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field}: {value!r}", field=field)
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}: {value!r}", field=field)
    if isinstance(value, float) and parsed != value:
        raise ValidationError(f"Invalid {field}: {value!r} is not a whole number", field=field)
    if parsed < minimum or parsed > maximum:
        raise ValidationError(
            f"Invalid {field}: {parsed} not in range [{minimum}, {maximum}]", field=field
        )
    return parsed
