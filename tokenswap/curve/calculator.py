"""Curve calculator interface and shared result types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from tokenswap.constants import INITIAL_SWAP_POOL_AMOUNT
from tokenswap.errors import EmptySupply

if TYPE_CHECKING:
    from tokenswap.math.precise_number import PreciseNumber


class TradeDirection(str, Enum):
    """Direction of a trade; curves may treat each token differently."""

    A_TO_B = "a_to_b"
    B_TO_A = "b_to_a"

    def opposite(self) -> TradeDirection:
        """A to B becomes B to A, and vice versa."""
        if self is TradeDirection.A_TO_B:
            return TradeDirection.B_TO_A
        return TradeDirection.A_TO_B


class RoundDirection(str, Enum):
    """Rounding applied to pool token <-> trading token conversions.

    Rounding always goes in the pool's favour: mint fewer pool tokens or pay
    out fewer trading tokens with FLOOR, burn more pool tokens or charge more
    trading tokens with CEILING.
    """

    FLOOR = "floor"
    CEILING = "ceiling"


@dataclass(frozen=True)
class SwapWithoutFeesResult:
    """Amounts moved by a swap before any fee is taken."""

    source_amount_swapped: int
    destination_amount_swapped: int


@dataclass(frozen=True)
class TradingTokenResult:
    """Trading token amounts equivalent to some quantity of pool tokens."""

    token_a_amount: int
    token_b_amount: int


class CurveCalculator(ABC):
    """Operations every swap curve provides.

    Numeric operations return None when the request cannot be priced
    (overflow, division by zero, a result that truncates to zero).
    Parameter problems are reported by validate() and validate_supply().
    The calculator never deals with fees; see SwapCurve for that.
    """

    @abstractmethod
    def swap_without_fees(
        self,
        source_amount: int,
        swap_source_amount: int,
        swap_destination_amount: int,
        trade_direction: TradeDirection,
    ) -> SwapWithoutFeesResult | None:
        """Calculate how much destination token a source amount buys.

        Args:
            source_amount: Source tokens offered, after fees
            swap_source_amount: Pool reserve of the source token
            swap_destination_amount: Pool reserve of the destination token
            trade_direction: Which token is the source

        Returns:
            Amounts actually swapped, or None. destination_amount_swapped is
            always at least 1.
        """
        ...

    def new_pool_supply(self) -> int:
        """Pool token supply minted for a new pool (Balancer-style fixed amount)."""
        return INITIAL_SWAP_POOL_AMOUNT

    @abstractmethod
    def pool_tokens_to_trading_tokens(
        self,
        pool_tokens: int,
        pool_token_supply: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        round_direction: RoundDirection,
    ) -> TradingTokenResult | None:
        """Get the trading tokens represented by an amount of pool tokens."""
        ...

    @abstractmethod
    def deposit_single_token_type(
        self,
        source_amount: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        pool_supply: int,
        trade_direction: TradeDirection,
    ) -> int | None:
        """Get the pool tokens minted for a deposit of only token A or B.

        Equivalent to swapping part of the deposit for the other token and
        depositing both, so it moves the spot price. Rounds down.
        """
        ...

    @abstractmethod
    def withdraw_single_token_type_exact_out(
        self,
        source_amount: int,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
        pool_supply: int,
        trade_direction: TradeDirection,
    ) -> int | None:
        """Get the pool tokens burned to withdraw an exact amount of one token.

        Equivalent to a two-sided withdrawal followed by a swap. Rounds up.
        """
        ...

    @abstractmethod
    def validate(self) -> None:
        """Check the curve parameters.

        Raises:
            InvalidCurve: If a parameter is out of range
        """
        ...

    def validate_supply(self, token_a_amount: int, token_b_amount: int) -> None:
        """Check the reserves a pool is created with.

        The default requires liquidity on both sides.

        Raises:
            EmptySupply: If a required side is empty
        """
        if token_a_amount == 0:
            raise EmptySupply("Token A supply must be non-zero")
        if token_b_amount == 0:
            raise EmptySupply("Token B supply must be non-zero")

    def allows_deposits(self) -> bool:
        """Whether deposits are allowed after the pool is created."""
        return True

    @abstractmethod
    def normalized_value(
        self,
        swap_token_a_amount: int,
        swap_token_b_amount: int,
    ) -> PreciseNumber | None:
        """Total value of the pool, in units of a single token.

        Product invariants have dimension tokens^2, so they are normalized
        with a square root. Used to check that no operation loses value.
        """
        ...
