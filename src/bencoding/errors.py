"""
Exceptions raised while decoding Bencoded data.
"""


class BencodeDecodeError(Exception):
    """Custom exception for Bencode decoding errors."""

    def __init__(self, message: str, position: int = None, byte: bytes = None):
        self.position = position
        self.byte = byte
        if position is not None:
            message = f"{message} at index {position}"
            if byte:
                message = f"{message}: {byte!r}"
        super().__init__(message)


class FormatError(BencodeDecodeError):
    """Malformed integer or string, unterminated container, or unknown lead byte."""

    def __init__(self, message: str, position: int = None, byte: bytes = None, invalid=None):
        super().__init__(message, position, byte)
        # BencodeInvalid sentinel when the failure came from the type dispatcher
        self.invalid = invalid


class KeyTypeError(BencodeDecodeError):
    """A dictionary key decoded to something other than a byte string."""
