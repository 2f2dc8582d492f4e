"""
Per-call parsing state threaded through the recursive decoders.
"""
from dataclasses import dataclass, field
from typing import FrozenSet

# Keys whose paired string value holds raw binary data (SHA-1 piece hashes)
BINARY_KEYS = frozenset({b"pieces"})


@dataclass
class ParserContext:
    """
    binary_next is the Binary-Payload Mode flag: when set, the next string
    value decodes as an opaque blob. It is armed by a dictionary key found in
    binary_keys and cleared as soon as the paired value has been decoded.
    """
    binary_keys: FrozenSet[bytes] = field(default_factory=lambda: BINARY_KEYS)
    binary_next: bool = False

    def arm(self, key: bytes) -> None:
        if key in self.binary_keys:
            self.binary_next = True

    def take_binary(self) -> bool:
        """Returns and clears the one-shot flag."""
        pending = self.binary_next
        self.binary_next = False
        return pending
