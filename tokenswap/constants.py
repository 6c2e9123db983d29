"""Pool-wide constants for the swap curves."""

# Pool tokens minted for a pool created with no prior liquidity
INITIAL_SWAP_POOL_AMOUNT = 1_000_000_000

# Stable curve: coin count and its square, as used by the invariant equations
N_COINS = 2
N_COINS_SQUARED = 4

# Stable curve: Newton iteration cap for D and for the destination balance
STABLE_ITERATIONS = 32

# Stable curve: accepted amplification coefficients (inclusive)
MIN_AMP = 1
MAX_AMP = 1_000_000
