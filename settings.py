# settings.py

# Wrapped SOL, the base asset every ratio is measured against
WSOL_MINT = "So11111111111111111111111111111111111111112"

# Lamports per SOL, shared scale for the bot ratio and the pool ratio
RATIO_SCALE = 10 ** 9

# Supported pool protocols
POOL_TYPES = ("DLMM", "DAMM")
DEFAULT_POOL_TYPE = "DLMM"

# Delay between trade cycles in milliseconds (a random value in this range is chosen)
MIN_INTERVAL_MS = 30_000
MAX_INTERVAL_MS = 120_000

# Delay after an unexpected error in the trading loop, in milliseconds
ERROR_DELAY_MS = 30_000

# Fraction used to perturb the pool ratio (0.05 = +/-5%)
RANDOM_FACTOR = 0.05

# Slippage tolerance in basis points (100 = 1%)
SLIPPAGE_BPS = 100

# Range for the fraction of holdings traded per cycle
MIN_TRADE_FRACTION = 0.01
MAX_TRADE_FRACTION = 0.05

# Legacy single TRADE_FRACTION derives the minimum as this share of the maximum
LEGACY_MIN_FRACTION_SHARE = 0.2

# Buys for every sell when the decision is random
BUYS_PER_SELL = 2.0

# Probability of following the ratio comparison instead of the random decision (0.0 to 1.0)
RANDOM_DECISION_THRESHOLD = 0.8

# Number of trade cycles to perform.
# If set to 0, the cycles will run indefinitely.
CYCLES = 0

# Compute budget for transactions the bot builds itself
UNIT_BUDGET = 100_000
UNIT_PRICE = 1_000_000

# Off-chain services
JUPITER_API_URL = "https://lite-api.jup.ag/swap/v1"
DLMM_API_URL = "https://dlmm-api.meteora.ag"
DAMM_API_URL = "https://amm-v2.meteora.ag"
HTTP_TIMEOUT = 15

EXPLORER_TX_URL = "https://solscan.io/tx/"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
