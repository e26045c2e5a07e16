from solders.keypair import Keypair

from config import Config
from settings import WSOL_MINT

TOKEN_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
POOL_ADDRESS = "5rCf1DM8LjKTw4YqhnoLcngyZYeNnQqztScTogYHAS6"


class ScriptedRandom:
    """Stands in for ``random`` and replays fixed draws in order."""

    def __init__(self, uniforms=(), randoms=()):
        self.uniforms = list(uniforms)
        self.randoms = list(randoms)

    def uniform(self, a, b):
        return self.uniforms.pop(0)

    def random(self):
        return self.randoms.pop(0)


def make_config(**overrides) -> Config:
    values = dict(
        rpc_url="https://rpc.example",
        pool_address=POOL_ADDRESS,
        pool_type="DLMM",
        token_mint=TOKEN_MINT,
        wsol_mint=WSOL_MINT,
        wallet=Keypair(),
        min_interval_ms=30_000,
        max_interval_ms=120_000,
        error_delay_ms=30_000,
        random_factor=0.05,
        slippage_bps=100,
        min_trade_fraction=0.01,
        max_trade_fraction=0.05,
        buys_per_sell=2.0,
        random_decision_threshold=0.8,
    )
    values.update(overrides)
    return Config(**values)
