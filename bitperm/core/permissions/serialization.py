"""Wire format for permission masks.

Masks are persisted and transported as base-10 strings so they survive
media that cannot hold integers wider than 53 bits (JSON clients, ORMs that
map big integers to floats). Python ints are arbitrary precision, so the
conversion is exact for any non-negative value.
"""

from typing import Union

from bitperm.core.exceptions import InvalidMaskError

MaskLike = Union[str, int]


def to_string(mask: int) -> str:
    """Render a mask as its decimal wire representation"""
    if isinstance(mask, bool) or not isinstance(mask, int):
        raise InvalidMaskError(mask, "mask must be an integer")
    if mask < 0:
        raise InvalidMaskError(mask, "mask must not be negative")
    return str(mask)


def parse(value: MaskLike) -> int:
    """
    Parse a mask from its wire representation

    Args:
        value: Decimal string, or an int that was already decoded upstream

    Returns:
        The mask as a non-negative int

    Raises:
        InvalidMaskError: If the value is not a non-negative decimal integer
    """
    if isinstance(value, bool):
        raise InvalidMaskError(value, "booleans are not masks")

    if isinstance(value, int):
        if value < 0:
            raise InvalidMaskError(value, "mask must not be negative")
        return value

    if not isinstance(value, str):
        raise InvalidMaskError(value, f"unsupported type {type(value).__name__}")

    text = value.strip()
    # str.isdigit accepts superscripts and other non-ASCII digits
    if not text or not (text.isascii() and text.isdigit()):
        raise InvalidMaskError(value)

    return int(text)
