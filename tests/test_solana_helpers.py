import unittest
from types import SimpleNamespace

from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import MessageV0
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import VersionedTransaction
from spl.token.instructions import get_associated_token_address

from errors import SwapError
from solana_helpers import confirm_signature, ensure_token_account, get_token_balance, submit_transaction
from tests.helpers import TOKEN_MINT


class _FakeClient:
    def __init__(self, accounts=(), balances=None, status=None):
        self.accounts = set(accounts)
        self.balances = balances or {}
        self.status = status
        self.sent = []
        self.account_queries = []
        self.balance_queries = []

    async def get_account_info(self, pubkey, commitment=None):
        self.account_queries.append(pubkey)
        return SimpleNamespace(value=object() if pubkey in self.accounts else None)

    async def get_token_account_balance(self, pubkey, commitment=None):
        self.balance_queries.append(pubkey)
        return SimpleNamespace(value=SimpleNamespace(amount=str(self.balances[pubkey])))

    async def send_transaction(self, txn, opts=None):
        self.sent.append(txn)
        return SimpleNamespace(value=Signature.default())

    async def confirm_transaction(self, signature, commitment=None):
        return SimpleNamespace(value=[self.status])


def empty_transaction(payer: Keypair) -> VersionedTransaction:
    message = MessageV0.try_compile(payer.pubkey(), [], [], Hash.default())
    return VersionedTransaction(message, [payer])


class TokenBalanceTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.owner = Keypair()
        self.mint = Pubkey.from_string(TOKEN_MINT)
        self.ata = get_associated_token_address(self.owner.pubkey(), self.mint)

    async def test_reads_associated_token_account(self) -> None:
        client = _FakeClient(accounts=[self.ata], balances={self.ata: 123_456})

        balance = await get_token_balance(client, self.owner.pubkey(), self.mint)

        self.assertEqual(balance, 123_456)
        self.assertEqual(client.balance_queries, [self.ata])

    async def test_missing_associated_account_is_zero(self) -> None:
        client = _FakeClient()

        balance = await get_token_balance(client, self.owner.pubkey(), self.mint)

        self.assertEqual(balance, 0)
        self.assertEqual(client.account_queries, [self.ata])
        self.assertEqual(client.balance_queries, [])

    async def test_existing_associated_account_is_not_recreated(self) -> None:
        client = _FakeClient(accounts=[self.ata])

        token_account = await ensure_token_account(client, self.owner, self.mint, 100_000, 1_000)

        self.assertEqual(token_account, self.ata)
        self.assertEqual(client.sent, [])


class SubmitTransactionTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.signer = Keypair()

    async def test_logs_explorer_link(self) -> None:
        client = _FakeClient(status=SimpleNamespace(err=None))

        with self.assertLogs("solana_helpers", level="INFO") as logs:
            signature = await submit_transaction(client, empty_transaction(self.signer), self.signer)

        self.assertEqual(signature, Signature.default())
        self.assertEqual(len(client.sent), 1)
        self.assertIn(f"Swap executed: https://solscan.io/tx/{Signature.default()}", logs.output[0])

    async def test_failed_status_raises(self) -> None:
        client = _FakeClient(status=SimpleNamespace(err="InstructionError"))

        with self.assertRaises(SwapError):
            await submit_transaction(client, empty_transaction(self.signer), self.signer)

    async def test_confirm_accepts_missing_status(self) -> None:
        await confirm_signature(_FakeClient(status=None), Signature.default())


if __name__ == "__main__":
    unittest.main()
