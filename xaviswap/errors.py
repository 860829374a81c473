"""XaviSwap error classes.

Every failure aborts the whole external call (see Chain.atomic). Errors are
grouped by category so callers can catch e.g. any SlippageError, and each
concrete class carries the revert reason string used by the deployed
contracts.
"""


class XaviSwapError(Exception):
    """Base error for XaviSwap operations."""

    reason: str = "XaviSwap: FAILED"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.reason)


# --- Categories ---


class ValidationError(XaviSwapError):
    """Malformed request: bad addresses, paths, arguments."""

    pass


class LiquidityError(XaviSwapError):
    """Share mint/burn rounds to zero or the pool cannot serve the request."""

    pass


class SlippageError(XaviSwapError):
    """Realized amounts fall outside the caller's bounds."""

    pass


class InvariantError(XaviSwapError):
    """Pool accounting invariant would be broken."""

    pass


class AuthorizationError(XaviSwapError):
    """Caller is not allowed to perform the operation."""

    pass


class TemporalError(XaviSwapError):
    """Deadline already passed."""

    pass


class PolicyError(XaviSwapError):
    """Request violates a configured risk policy."""

    pass


class TransferError(XaviSwapError):
    """Underlying asset transfer failed."""

    pass


class ConcurrencyError(XaviSwapError):
    """Reentrant call rejected."""

    pass


class PausedError(XaviSwapError):
    """Entry point blocked by the administrative pause switch."""

    reason = "Pausable: paused"


# --- Validation ---


class IdenticalAddresses(ValidationError):
    reason = "XaviSwap: IDENTICAL_ADDRESSES"


class ZeroAddress(ValidationError):
    reason = "XaviSwap: ZERO_ADDRESS"


class InvalidAddress(ValidationError):
    reason = "XaviSwap: INVALID_ADDRESS"


class InvalidPath(ValidationError):
    reason = "XaviSwap: INVALID_PATH"


class InvalidRecipient(ValidationError):
    """Swap output sent to one of the pool's own tokens."""

    reason = "XaviSwap: INVALID_TO"


class PairExists(ValidationError):
    reason = "XaviSwap: PAIR_EXISTS"


class PairNotFound(ValidationError):
    reason = "XaviSwap: PAIR_NOT_FOUND"


class AlreadyInitialized(ValidationError):
    reason = "XaviSwap: ALREADY_INITIALIZED"


class NotAContract(ValidationError):
    """Address does not resolve to a deployed contract."""

    reason = "XaviSwap: NOT_A_CONTRACT"


class InvalidCallee(ValidationError):
    """Flash swap recipient does not implement the callback capability."""

    reason = "XaviSwap: INVALID_CALLEE"


class InvalidConfiguration(ValidationError):
    reason = "XaviSwap: INVALID_CONFIGURATION"


class UnsupportedAsset(ValidationError):
    """Asset delivered a different amount than requested (fee-on-transfer or rebasing)."""

    reason = "XaviSwap: UNSUPPORTED_ASSET"


# --- Liquidity ---


class InsufficientLiquidityMinted(LiquidityError):
    reason = "XaviSwap: INSUFFICIENT_LIQUIDITY_MINTED"


class InsufficientLiquidityBurned(LiquidityError):
    reason = "XaviSwap: INSUFFICIENT_LIQUIDITY_BURNED"


class InsufficientLiquidity(LiquidityError):
    reason = "XaviSwap: INSUFFICIENT_LIQUIDITY"


class InsufficientBalance(LiquidityError):
    """Holder does not own enough tokens or shares."""

    reason = "XaviSwap: INSUFFICIENT_BALANCE"


class InsufficientAllowance(LiquidityError):
    reason = "XaviSwap: INSUFFICIENT_ALLOWANCE"


class InsufficientInputAmount(LiquidityError):
    reason = "XaviSwap: INSUFFICIENT_INPUT_AMOUNT"


class InsufficientAmount(LiquidityError):
    reason = "XaviSwap: INSUFFICIENT_AMOUNT"


# --- Slippage ---


class InsufficientOutputAmount(SlippageError):
    reason = "XaviSwap: INSUFFICIENT_OUTPUT_AMOUNT"


class ExcessiveInputAmount(SlippageError):
    reason = "XaviSwap: EXCESSIVE_INPUT_AMOUNT"


class InsufficientAAmount(SlippageError):
    reason = "XaviSwap: INSUFFICIENT_A_AMOUNT"


class InsufficientBAmount(SlippageError):
    reason = "XaviSwap: INSUFFICIENT_B_AMOUNT"


# --- Invariant ---


class KInvariantViolation(InvariantError):
    reason = "XaviSwap: K"


class ReserveOverflow(InvariantError):
    reason = "XaviSwap: OVERFLOW"


# --- Authorization / temporal / policy / transfer / concurrency ---


class Forbidden(AuthorizationError):
    reason = "XaviSwap: FORBIDDEN"


class OwnershipRenounceDisabled(AuthorizationError):
    reason = "XaviSwap: RENOUNCE_DISABLED"


class DeadlineExpired(TemporalError):
    reason = "XaviSwap: EXPIRED"


class TradeSizeExceeded(PolicyError):
    reason = "XaviSwap: SWAP_TOO_LARGE"


class TransferFailed(TransferError):
    reason = "TransferHelper: TRANSFER_FAILED"


class TransferFromFailed(TransferError):
    reason = "TransferHelper: TRANSFER_FROM_FAILED"


class NativeTransferFailed(TransferError):
    reason = "TransferHelper: NATIVE_TRANSFER_FAILED"


class Locked(ConcurrencyError):
    reason = "XaviSwap: LOCKED"
