"""Bonding curves and the fee model applied around them."""

from tokenswap.curve.base import (
    CurveType,
    OwnerFeeResult,
    SwapCurve,
    SwapResult,
    WithdrawAllResult,
)
from tokenswap.curve.calculator import (
    CurveCalculator,
    RoundDirection,
    SwapWithoutFeesResult,
    TradeDirection,
    TradingTokenResult,
)
from tokenswap.curve.constant_price import ConstantPriceCurve
from tokenswap.curve.constant_product import ConstantProductCurve
from tokenswap.curve.fees import FeeFraction, Fees, calculate_fee, pre_fee_amount
from tokenswap.curve.offset import OffsetCurve
from tokenswap.curve.stable import StableCurve

__all__ = [
    "ConstantPriceCurve",
    "ConstantProductCurve",
    "CurveCalculator",
    "CurveType",
    "FeeFraction",
    "Fees",
    "OffsetCurve",
    "OwnerFeeResult",
    "RoundDirection",
    "StableCurve",
    "SwapCurve",
    "SwapResult",
    "SwapWithoutFeesResult",
    "TradeDirection",
    "TradingTokenResult",
    "WithdrawAllResult",
    "calculate_fee",
    "pre_fee_amount",
]
