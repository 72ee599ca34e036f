class MalformedAccount(Exception):
    """

    Raised when account bytes cannot be decoded into a typed record.  The following conditions will
    result in this error being raised:

        * The leading 8 byte discriminator does not match the requested account kind
        * The buffer is shorter than the fixed account size of the layout
        * An embedded key (token mint, pool reference) is not a valid 32 byte public key

    This error is permanent for the account bytes that produced it, and should never be retried.

    """


class TickMismatch(Exception):
    """
    Raised when a tick record does not correspond to the position boundary it is supplied for.

    This indicates a wiring defect in the caller, ie passing the upper tick as the lower tick, or
    passing a tick array that does not contain the position's boundary tick.
    """


class PoolMismatch(Exception):
    """
    Raised when a position or a tick array references a different pool than the pool record supplied
    alongside it.
    """


class InvalidRange(Exception):
    """
    Raised when a price range is empty or inverted.  Occurs when tick_lower >= tick_upper, or when
    sqrt_price_lower >= sqrt_price_upper is passed to the liquidity converter.
    """


class TickMathError(Exception):
    """
    Raised when a tick index is outside the bounds supported by the concentrated liquidity programs
    (-443636 to 443636), or when tick spacing parameters are invalid
    """


class MissingDecimals(Exception):
    """
    Raised when a raw token amount cannot be scaled because the decimals of the token mint are unknown.

    Whirlpool accounts do not store mint decimals, so decimals have to be supplied by the caller
    when valuing Orca positions.
    """


POSITION_ERRORS = (MalformedAccount, TickMismatch, PoolMismatch, InvalidRange, TickMathError, MissingDecimals)
"""Errors that invalidate a single position without affecting other positions in the same request"""
