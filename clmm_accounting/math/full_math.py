from .shared import Q64_RESOLUTION


class FullMathModule:
    """
    Math Module for computing products of 128 bit fixed point numbers without intermediate overflow.

    Python integers are arbitrary precision, so (a * b) never loses bits before the division or shift is applied.
    This matches the 192 & 256 bit intermediate products used by the on-chain programs.
    """

    @classmethod
    def mul_div(cls, numerator_1: int, numerator_2: int, denominator: int) -> int:
        """
        Computes the result of (numerator_1 * numerator_2) / denominator, rounded down
        """
        if denominator == 0:
            raise ZeroDivisionError("Division By Zero")
        return (numerator_1 * numerator_2) // denominator

    @classmethod
    def mul_div_rounding_up(cls, numerator_1: int, numerator_2: int, denominator: int) -> int:
        """
        Computes the result of (numerator_1 * numerator_2) / denominator, rounded up
        """
        if denominator == 0:
            raise ZeroDivisionError("Division By Zero")
        return -(-(numerator_1 * numerator_2) // denominator)

    @classmethod
    def mul_shift_right(cls, numerator_1: int, numerator_2: int, shift: int = Q64_RESOLUTION) -> int:
        """
        Computes (numerator_1 * numerator_2) >> shift.  Converts a product with a Q64.64 factor back to
        an integer, truncating the fractional bits.
        """
        if numerator_1 < 0 or numerator_2 < 0:
            raise ValueError("mul_shift_right operates on unsigned values")
        return (numerator_1 * numerator_2) >> shift
