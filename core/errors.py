from __future__ import annotations


class ImageShopError(Exception):
    pass


class InvalidGridError(ImageShopError, ValueError):
    """Grid is not an HxWx4 uint8 array, or rows have differing lengths."""


class IndexOutOfRangeError(ImageShopError, IndexError):
    pass


class InvalidChannelValueError(ImageShopError, ValueError):
    """Only raised by strict packing; the default policy clamps."""


class UnknownOperationError(ImageShopError, KeyError):
    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class NoImageError(ImageShopError, RuntimeError):
    pass
