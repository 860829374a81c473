"""Protocol constants for XaviSwap.

Centralizes pool parameters, fixed-point widths and well-known addresses.
"""

from xaviswap.models.types import is_valid_address

# Shares permanently locked on the first provision of every pool
MINIMUM_LIQUIDITY = 1000

# Swap fee: amount_in * FEE_NUMERATOR / FEE_DENOMINATOR reaches the curve (0.3% fee)
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000
# Same fee expressed for the balance-adjusted invariant check
FEE_ADJUSTMENT = FEE_DENOMINATOR - FEE_NUMERATOR  # = 3

# Protocol fee takes 1/(PROTOCOL_FEE_DIVISOR + 1) of fee growth (1/6 of 0.3% = 0.05%)
PROTOCOL_FEE_DIVISOR = 5

# Reserve width and UQ112x112 fixed-point resolution for price accumulators
RESERVE_BITS = 112
Q112 = 2**112

# Block timestamps are stored modulo 2**32
TIMESTAMP_MODULUS = 2**32

# Router circuit breaker: first-hop input as a percentage of its reserve
DEFAULT_MAX_SWAP_PERCENT = 30

# LP share token metadata
LP_TOKEN_NAME = "Xavi LP"
LP_TOKEN_SYMBOL = "XAVI-LP"
LP_TOKEN_DECIMALS = 18


def _validate_address(name: str, address: str) -> str:
    """Validate and return a well-known address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Holder of the permanently locked minimum liquidity; never a valid caller
ZERO_ADDRESS = _validate_address("ZERO_ADDRESS", "0x" + "00" * 20)

# keccak256 of the pair bytecode in the production deployment, used for CREATE2 addressing
INIT_CODE_HASH = bytes.fromhex("96e8ac4277198ff8b6f785478aa9a39f403cb768dd02cbee326c3e7da348845f")
