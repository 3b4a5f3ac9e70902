"""
Token and NFT creation builders

Both produce one unsigned transaction, in this order:
1. CreateAccount for the mint (MetadataPointer layout, rent pre-paid)
2. MetadataPointer::Initialize pointing at the mint itself
3. InitializeMint
4. Rent top-up for the metadata record (only if the delta is positive)
5. Token metadata Initialize
6. Create the payer's associated token account (only if missing)
7. MintTo the payer's associated token account
"""

import logging
from typing import Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from ..config import get_config
from ..errors import SDKError, ValidationError
from ..infra.rpc import RpcClient
from ..instructions.system import build_create_account_instruction, build_transfer_instruction
from ..instructions.token import (
    MINT_WITH_METADATA_POINTER_SIZE,
    build_create_associated_token_account_instruction,
    build_initialize_metadata_pointer_instruction,
    build_initialize_mint_instruction,
    build_initialize_token_metadata_instruction,
    build_mint_to_instruction,
    get_associated_token_address,
    metadata_space,
)
from ..types import (
    BlockchainConfig,
    CreateNFTParams,
    CreateTokenParams,
    TokenTransactionResult,
    UnsignedTransaction,
    require_u64,
    to_int,
    to_pubkey,
)

logger = logging.getLogger(__name__)

NFT_SUPPLY = 1
NFT_DECIMALS = 0


def _require_text(value: str, field: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"Invalid {field}: {value!r}", field=field)
    return value


async def _build_mint_transaction(
    rpc: RpcClient,
    chain: BlockchainConfig,
    payer: Pubkey,
    mint_keypair: Keypair,
    name: str,
    symbol: str,
    uri: str,
    decimals: int,
    freeze_authority: Optional[Pubkey],
    amount_raw: int,
) -> TokenTransactionResult:
    mint = mint_keypair.pubkey()
    token_program = chain.token_program

    associated_token = get_associated_token_address(
        payer, mint, token_program, chain.associated_token_program
    )
    mint_len = MINT_WITH_METADATA_POINTER_SIZE
    extra_space = metadata_space(name, symbol, uri, get_config().tx.metadata_padding)

    mint_rent = await rpc.get_minimum_balance_for_rent_exemption(mint_len)
    total_rent = await rpc.get_minimum_balance_for_rent_exemption(mint_len + extra_space)
    additional_rent = total_rent - mint_rent

    transaction = UnsignedTransaction(fee_payer=payer)

    transaction.add(
        build_create_account_instruction(
            from_pubkey=payer,
            new_account=mint,
            lamports=mint_rent,
            space=mint_len,
            owner=token_program,
        ),
        build_initialize_metadata_pointer_instruction(
            mint=mint,
            authority=payer,
            metadata_address=mint,
            token_program=token_program,
        ),
        build_initialize_mint_instruction(
            mint=mint,
            decimals=decimals,
            mint_authority=payer,
            freeze_authority=freeze_authority,
            token_program=token_program,
            rent_sysvar=chain.rent_sysvar,
        ),
    )

    if additional_rent > 0:
        transaction.add(build_transfer_instruction(payer, mint, additional_rent))

    transaction.add(
        build_initialize_token_metadata_instruction(
            token_program=token_program,
            metadata=mint,
            update_authority=payer,
            mint=mint,
            mint_authority=payer,
            name=name,
            symbol=symbol,
            uri=uri,
        )
    )

    ata_info = await rpc.get_account_info(str(associated_token))
    if not ata_info:
        transaction.add(
            build_create_associated_token_account_instruction(
                payer=payer,
                associated_token=associated_token,
                owner=payer,
                mint=mint,
                token_program=token_program,
                associated_token_program=chain.associated_token_program,
            )
        )
    else:
        logger.debug(f"Associated token account {associated_token} already exists")

    transaction.add(
        build_mint_to_instruction(
            mint=mint,
            destination=associated_token,
            authority=payer,
            amount=amount_raw,
            token_program=token_program,
        )
    )

    # The new mint account must co-sign its own creation
    transaction.extra_signers.append(mint_keypair)

    return TokenTransactionResult(
        transaction=transaction,
        mint_keypair=mint_keypair,
        mint_address=mint,
        associated_token_address=associated_token,
        metadata_space=extra_space,
    )


async def create_token_transaction(
    rpc: RpcClient,
    chain: BlockchainConfig,
    params: CreateTokenParams,
    payer: Pubkey,
) -> TokenTransactionResult:
    """
    Build a fungible Token-2022 mint with on-mint metadata

    supply is in whole tokens; supply * 10**decimals raw units are minted
    to the payer's associated token account. The payer is mint authority,
    update authority and fee payer.

    Args:
        rpc: RPC client (rent and account lookups)
        chain: Chain configuration
        params: Token parameters
        payer: Paying wallet

    Returns:
        TokenTransactionResult (mint keypair attached as extra signer)

    Raises:
        ValidationError: Malformed parameters (before any RPC call)
        SDKError: RPC or encoding failure
    """
    payer = to_pubkey(payer, "payer")
    name = _require_text(params.name, "name")
    symbol = _require_text(params.symbol, "symbol")
    uri = _require_text(params.uri, "uri")
    decimals = to_int(params.decimals, "decimals", maximum=255)
    supply = to_int(params.supply, "supply")
    if supply <= 0:
        raise ValidationError.non_positive("supply", params.supply)
    amount_raw = require_u64(supply * 10 ** decimals, "supply")
    freeze_authority = (
        to_pubkey(params.freeze_authority, "freeze_authority")
        if params.freeze_authority is not None
        else None
    )
    mint_keypair = params.mint_keypair or Keypair()

    try:
        result = await _build_mint_transaction(
            rpc,
            chain,
            payer,
            mint_keypair,
            name,
            symbol,
            uri,
            decimals,
            freeze_authority,
            amount_raw,
        )
    except ValidationError:
        raise
    except Exception as e:
        raise SDKError.wrap("Failed to create token transaction", e) from e

    logger.info(
        f"Built token transaction: {symbol} mint={result.mint_address}, "
        f"supply={supply}, decimals={decimals}, instructions={len(result.instructions)}"
    )
    return result


async def create_nft_transaction(
    rpc: RpcClient,
    chain: BlockchainConfig,
    params: CreateNFTParams,
    payer: Pubkey,
) -> TokenTransactionResult:
    """
    Build an NFT: supply 1, decimals 0, payer as freeze authority

    Raises:
        ValidationError: Malformed parameters (before any RPC call)
        SDKError: RPC or encoding failure
    """
    payer = to_pubkey(payer, "payer")
    name = _require_text(params.name, "name")
    symbol = _require_text(params.symbol, "symbol")
    uri = _require_text(params.uri, "uri")
    mint_keypair = params.mint_keypair or Keypair()

    try:
        result = await _build_mint_transaction(
            rpc,
            chain,
            payer,
            mint_keypair,
            name,
            symbol,
            uri,
            NFT_DECIMALS,
            payer,
            NFT_SUPPLY,
        )
    except ValidationError:
        raise
    except Exception as e:
        raise SDKError.wrap("Failed to create NFT transaction", e) from e

    logger.info(f"Built NFT transaction: {name} mint={result.mint_address}")
    return result
