ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# PositionManager / router sentinel recipients (v4-periphery ActionConstants)
MSG_SENDER = "0x0000000000000000000000000000000000000001"
ADDRESS_THIS = "0x0000000000000000000000000000000000000002"
OPEN_DELTA = 0

MAX_UINT48 = 2**48 - 1
MAX_UINT128 = 2**128 - 1
MAX_UINT160 = 2**160 - 1
MAX_UINT256 = 2**256 - 1

BPS_DENOMINATOR = 10_000
DEFAULT_SLIPPAGE_TOLERANCE_BPS = 50

# Seconds
SWAP_DEADLINE_SECONDS = 5 * 60
DEFAULT_DEADLINE_SECONDS = 5 * 60
PERMIT2_SIG_DEADLINE_SECONDS = 60 * 60
