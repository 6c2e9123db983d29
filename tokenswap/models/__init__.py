"""Pydantic models for pool configuration."""

from tokenswap.models.config import CurveConfig, FeeFractionConfig, FeesConfig, PoolConfig
from tokenswap.models.types import Uint64

__all__ = [
    # Types
    "Uint64",
    # Configuration
    "CurveConfig",
    "FeeFractionConfig",
    "FeesConfig",
    "PoolConfig",
]
