"""Token swap pool pricing: bonding curves, fees and fixed-point math."""

from tokenswap.curve import CurveType, Fees, SwapCurve, TradeDirection
from tokenswap.models import PoolConfig

__version__ = "0.1.0"
__all__ = ["CurveType", "Fees", "PoolConfig", "SwapCurve", "TradeDirection", "__version__"]
