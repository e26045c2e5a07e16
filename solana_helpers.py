import logging

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Confirmed
from solana.rpc.types import TxOpts
from solders.compute_budget import set_compute_unit_limit, set_compute_unit_price
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import VersionedTransaction
from spl.token.instructions import create_associated_token_account, get_associated_token_address

from errors import SwapError
from models import Holdings
from settings import EXPLORER_TX_URL

logger = logging.getLogger(__name__)


async def get_sol_balance(client: AsyncClient, owner: Pubkey) -> int:
    response = await client.get_balance(owner, Confirmed)
    return response.value


async def token_account_exists(client: AsyncClient, token_account: Pubkey) -> bool:
    response = await client.get_account_info(token_account, Confirmed)
    return response.value is not None


async def get_token_balance(client: AsyncClient, owner: Pubkey, mint: Pubkey) -> int:
    # Swaps settle into the associated token account, so that is the balance to size from
    token_account = get_associated_token_address(owner, mint)
    if not await token_account_exists(client, token_account):
        logger.info(f"No associated token account {token_account} for {owner}")
        return 0
    balance_info = await client.get_token_account_balance(token_account, Confirmed)
    return int(balance_info.value.amount)


async def get_holdings(client: AsyncClient, owner: Pubkey, token_mint: Pubkey) -> Holdings:
    return Holdings(
        sol_lamports=await get_sol_balance(client, owner),
        token_amount=await get_token_balance(client, owner, token_mint),
    )


async def get_mint_decimals(client: AsyncClient, mint: Pubkey) -> int:
    response = await client.get_token_supply(mint, Confirmed)
    return response.value.decimals


async def confirm_signature(client: AsyncClient, signature: Signature) -> None:
    response = await client.confirm_transaction(signature, Confirmed)
    status = response.value[0] if response.value else None
    if status is not None and status.err is not None:
        raise SwapError(f"Transaction {signature} failed: {status.err}")


async def compile_and_send_transaction(client: AsyncClient, key_pair: Keypair, instructions) -> Signature:
    logger.debug("Compiling transaction message...")
    latest_blockhash = await client.get_latest_blockhash()
    compiled_message = MessageV0.try_compile(
        key_pair.pubkey(),
        instructions,
        [],
        latest_blockhash.value.blockhash,
    )
    txn = VersionedTransaction(compiled_message, [key_pair])
    logger.debug("Sending transaction...")
    response = await client.send_transaction(txn, opts=TxOpts(preflight_commitment=Confirmed))
    await confirm_signature(client, response.value)
    logger.info(f"Transaction Signature: {EXPLORER_TX_URL}{response.value}")
    return response.value


async def ensure_token_account(client: AsyncClient, key_pair: Keypair, mint: Pubkey,
                               unit_budget: int, unit_price: int) -> Pubkey:
    token_account = get_associated_token_address(key_pair.pubkey(), mint)
    if await token_account_exists(client, token_account):
        return token_account

    logger.info(f"Creating associated token account: {token_account}")
    instructions = [
        set_compute_unit_limit(unit_budget),
        set_compute_unit_price(unit_price),
        create_associated_token_account(key_pair.pubkey(), key_pair.pubkey(), mint),
    ]
    await compile_and_send_transaction(client, key_pair, instructions)
    return token_account


async def submit_transaction(client: AsyncClient, transaction: VersionedTransaction, signer: Keypair) -> Signature:
    signed = VersionedTransaction(transaction.message, [signer])
    response = await client.send_transaction(signed, opts=TxOpts(preflight_commitment=Confirmed))
    await confirm_signature(client, response.value)
    logger.info(f"Swap executed: {EXPLORER_TX_URL}{response.value}")
    return response.value
