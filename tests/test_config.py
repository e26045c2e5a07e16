import json
import unittest

import base58
from solders.keypair import Keypair

from config import load_config, parse_private_key
from errors import ConfigError
from settings import WSOL_MINT
from tests.helpers import POOL_ADDRESS, TOKEN_MINT


class ParsePrivateKeyTests(unittest.TestCase):
    def setUp(self) -> None:
        self.keypair = Keypair()

    def test_accepts_json_byte_array(self) -> None:
        raw = json.dumps(list(bytes(self.keypair)))
        self.assertEqual(parse_private_key(raw).pubkey(), self.keypair.pubkey())

    def test_accepts_base58(self) -> None:
        raw = base58.b58encode(bytes(self.keypair)).decode()
        self.assertEqual(parse_private_key(raw).pubkey(), self.keypair.pubkey())

    def test_rejects_garbage(self) -> None:
        with self.assertRaises(ConfigError):
            parse_private_key("not a key 0OIl")

    def test_rejects_short_json_array(self) -> None:
        with self.assertRaises(ConfigError):
            parse_private_key("[1, 2, 3]")


class LoadConfigTests(unittest.TestCase):
    def env(self, **overrides):
        values = {
            "SOLANA_RPC_URL": "https://rpc.example",
            "METEORA_POOL": POOL_ADDRESS,
            "TOKEN_MINT": TOKEN_MINT,
            "PRIVATE_KEY": base58.b58encode(bytes(Keypair())).decode(),
        }
        values.update(overrides)
        return {k: v for k, v in values.items() if v is not None}

    def test_defaults(self) -> None:
        config = load_config(self.env())

        self.assertEqual(config.pool_type, "DLMM")
        self.assertEqual(config.wsol_mint, WSOL_MINT)
        self.assertEqual((config.min_interval_ms, config.max_interval_ms), (30_000, 120_000))
        self.assertEqual(config.error_delay_ms, 30_000)
        self.assertEqual(config.slippage_bps, 100)
        self.assertEqual((config.min_trade_fraction, config.max_trade_fraction), (0.01, 0.05))
        self.assertEqual(config.buys_per_sell, 2.0)
        self.assertEqual(config.random_decision_threshold, 0.8)
        self.assertEqual(config.cycles, 0)

    def test_pool_type_is_case_insensitive(self) -> None:
        self.assertEqual(load_config(self.env(POOL_TYPE="damm")).pool_type, "DAMM")

    def test_invalid_pool_type(self) -> None:
        with self.assertRaises(ConfigError):
            load_config(self.env(POOL_TYPE="CLMM"))

    def test_missing_private_key(self) -> None:
        with self.assertRaises(ConfigError):
            load_config(self.env(PRIVATE_KEY=None))

    def test_legacy_trade_fraction_derives_minimum(self) -> None:
        config = load_config(self.env(TRADE_FRACTION="0.1", MIN_TRADE_FRACTION="0.5"))

        self.assertEqual(config.max_trade_fraction, 0.1)
        self.assertAlmostEqual(config.min_trade_fraction, 0.02)

    def test_explicit_fraction_bounds(self) -> None:
        config = load_config(self.env(MIN_TRADE_FRACTION="0.02", MAX_TRADE_FRACTION="0.2"))
        self.assertEqual((config.min_trade_fraction, config.max_trade_fraction), (0.02, 0.2))

    def test_unparseable_number(self) -> None:
        with self.assertRaises(ConfigError):
            load_config(self.env(SLIPPAGE_BPS="one percent"))

    def test_inverted_interval_bounds(self) -> None:
        with self.assertRaises(ConfigError):
            load_config(self.env(MIN_INTERVAL_MS="5000", MAX_INTERVAL_MS="1000"))

    def test_invalid_log_level(self) -> None:
        with self.assertRaises(ConfigError):
            load_config(self.env(LOG_LEVEL="chatty"))

    def test_log_level_is_case_insensitive(self) -> None:
        self.assertEqual(load_config(self.env(LOG_LEVEL="debug")).log_level, "DEBUG")

    def test_config_error_is_environment_error(self) -> None:
        with self.assertRaises(EnvironmentError):
            load_config(self.env(SOLANA_RPC_URL=None))


if __name__ == "__main__":
    unittest.main()
