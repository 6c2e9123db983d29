"""Pydantic models for pool configuration files.

Example:
    {
        "curve": {"curveType": "stable", "amp": 100},
        "fees": {
            "tradeFee": {"numerator": 25, "denominator": 10000},
            "ownerTradeFee": {"numerator": 5, "denominator": 10000}
        }
    }

Models only check shape and integer ranges. Whether the values make sense
for a pool (fee below 1, non-zero price, amp in range) is decided by
SwapCurve.initialize(), so a config can be loaded and then rejected with
the same error a pool would raise.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from tokenswap.curve.base import CurveType, SwapCurve
from tokenswap.curve.calculator import CurveCalculator
from tokenswap.curve.constant_price import ConstantPriceCurve
from tokenswap.curve.constant_product import ConstantProductCurve
from tokenswap.curve.fees import FeeFraction, Fees
from tokenswap.curve.offset import OffsetCurve
from tokenswap.curve.stable import StableCurve
from tokenswap.models.types import Uint64

# Parameter each curve type needs, by field name
_REQUIRED_PARAMETER: dict[CurveType, str | None] = {
    CurveType.CONSTANT_PRODUCT: None,
    CurveType.CONSTANT_PRICE: "token_b_price",
    CurveType.OFFSET: "token_b_offset",
    CurveType.STABLE: "amp",
}


class FeeFractionConfig(BaseModel):
    """A fee as numerator / denominator; 0/0 disables it."""

    model_config = {"frozen": True, "extra": "forbid"}

    numerator: Uint64 = 0
    denominator: Uint64 = 0

    def to_fraction(self) -> FeeFraction:
        return FeeFraction(numerator=self.numerator, denominator=self.denominator)


class FeesConfig(BaseModel):
    """All four pool fees. Omitted fees are disabled."""

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    trade_fee: FeeFractionConfig = Field(default_factory=FeeFractionConfig, alias="tradeFee")
    owner_trade_fee: FeeFractionConfig = Field(
        default_factory=FeeFractionConfig, alias="ownerTradeFee"
    )
    owner_withdraw_fee: FeeFractionConfig = Field(
        default_factory=FeeFractionConfig, alias="ownerWithdrawFee"
    )
    host_fee: FeeFractionConfig = Field(default_factory=FeeFractionConfig, alias="hostFee")

    def to_fees(self) -> Fees:
        return Fees(
            trade_fee=self.trade_fee.to_fraction(),
            owner_trade_fee=self.owner_trade_fee.to_fraction(),
            owner_withdraw_fee=self.owner_withdraw_fee.to_fraction(),
            host_fee=self.host_fee.to_fraction(),
        )


class CurveConfig(BaseModel):
    """Curve type and the parameter that type takes."""

    model_config = {"frozen": True, "extra": "forbid", "populate_by_name": True}

    curve_type: CurveType = Field(alias="curveType")
    token_b_price: Uint64 | None = Field(
        default=None,
        alias="tokenBPrice",
        description="Token A per token B; constant_price only.",
    )
    token_b_offset: Uint64 | None = Field(
        default=None,
        alias="tokenBOffset",
        description="Phantom token B reserve; offset only.",
    )
    amp: Uint64 | None = Field(
        default=None,
        description="Amplification coefficient; stable only.",
    )

    @model_validator(mode="after")
    def check_parameter(self) -> CurveConfig:
        required = _REQUIRED_PARAMETER[self.curve_type]
        if required is not None and getattr(self, required) is None:
            raise ValueError(f"{self.curve_type.value} curve requires '{required}'")
        return self

    def to_calculator(self) -> CurveCalculator:
        if self.curve_type is CurveType.CONSTANT_PRICE:
            assert self.token_b_price is not None  # Checked by check_parameter
            return ConstantPriceCurve(token_b_price=self.token_b_price)
        if self.curve_type is CurveType.OFFSET:
            assert self.token_b_offset is not None
            return OffsetCurve(token_b_offset=self.token_b_offset)
        if self.curve_type is CurveType.STABLE:
            assert self.amp is not None
            return StableCurve(amp=self.amp)
        return ConstantProductCurve()

    def to_swap_curve(self) -> SwapCurve:
        return SwapCurve(calculator=self.to_calculator())


class PoolConfig(BaseModel):
    """Complete configuration of one pool."""

    model_config = {"frozen": True, "extra": "forbid"}

    curve: CurveConfig
    fees: FeesConfig = Field(default_factory=FeesConfig)

    @classmethod
    def from_json_file(cls, path: str | Path) -> PoolConfig:
        """Load and validate a JSON configuration file.

        Raises:
            OSError: If the file cannot be read
            pydantic.ValidationError: If the content does not match the model
        """
        return cls.model_validate_json(Path(path).read_text())

    def to_swap_curve(self) -> SwapCurve:
        return self.curve.to_swap_curve()

    def to_fees(self) -> Fees:
        return self.fees.to_fees()
