from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple

from errors import PoolStateError


class Direction(Enum):
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class Holdings:
    sol_lamports: int
    token_amount: int

    @property
    def is_tradable(self) -> bool:
        return self.sol_lamports > 0 and self.token_amount > 0


@dataclass(frozen=True)
class PoolState:
    mint_x: str
    mint_y: str
    reserve_x: int
    reserve_y: int

    def __post_init__(self):
        if self.reserve_x < 0 or self.reserve_y < 0:
            raise PoolStateError(f"Negative reserves: x={self.reserve_x}, y={self.reserve_y}")

    def base_side(self, base_mint: str) -> str:
        if self.mint_x == base_mint:
            return "x"
        if self.mint_y == base_mint:
            return "y"
        raise PoolStateError(f"Base mint {base_mint} is not in pool {self.mint_x}/{self.mint_y}")

    def reserves_for(self, base_mint: str) -> Tuple[int, int]:
        """Return (base_reserve, token_reserve) whichever side the base asset sits on."""
        if self.base_side(base_mint) == "x":
            return self.reserve_x, self.reserve_y
        return self.reserve_y, self.reserve_x

    def check_pair(self, base_mint: str, token_mint: str) -> None:
        base_side = self.base_side(base_mint)
        paired = self.mint_y if base_side == "x" else self.mint_x
        if paired != token_mint:
            raise PoolStateError(f"Pool pairs {base_mint} with {paired}, not the configured token {token_mint}")

    def other_mint(self, mint: str) -> str:
        if mint == self.mint_x:
            return self.mint_y
        if mint == self.mint_y:
            return self.mint_x
        raise PoolStateError(f"Mint {mint} is not in pool {self.mint_x}/{self.mint_y}")


@dataclass(frozen=True)
class Ratios:
    bot_ratio: float
    pool_ratio: float
    target_ratio: float


@dataclass(frozen=True)
class TradeDecision:
    direction: Direction
    input_mint: str
    output_mint: str
    input_amount: int
    natural: bool
    trade_fraction: float


@dataclass(frozen=True)
class SwapQuote:
    input_mint: str
    output_mint: str
    in_amount: int
    out_amount: int
    min_out: int
    route: Dict[str, Any] = field(default_factory=dict)
