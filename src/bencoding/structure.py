"""
Data structures for representing Bencoded types.

Every node records how many bytes its encoded form occupied in the source
buffer (``consumed``) so callers can advance their own cursor. Containers own
their children exclusively: a node can be attached to one container only.
"""
from enum import IntEnum

__all__ = [
    "BencodeKind",
    "BencodeType",
    "BencodeInt",
    "BencodeString",
    "BencodeBlob",
    "BencodeList",
    "BencodeDict",
    "BencodeInvalid",
]


class BencodeKind(IntEnum):
    """Tags for the bencode value variants."""
    INTEGER = 0
    STRING = 1
    BLOB = 2
    LIST = 3
    DICT = 4
    INVALID = 5


class BencodeType:
    """Base class for all Bencode data types."""
    kind = BencodeKind.INVALID

    def __init__(self, consumed: int = 0):
        self.consumed = consumed
        self.owner = None
        self.released = False

    def children(self) -> list:
        return []

    def release(self) -> int:
        """
        Releases this node and everything it owns, children before their
        container. Returns the number of nodes released.
        """
        count = 0
        stack = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            children = node.children()
            if expanded or not children:
                count += node._release_one()
                continue
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(children))
        return count

    def _release_one(self) -> int:
        self.released = True
        return 1


class BencodeInt(BencodeType):
    """Represents a Bencoded integer."""
    kind = BencodeKind.INTEGER

    def __init__(self, value: int, text: str = None, consumed: int = 0):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("BencodeInt requires an integer.")
        super().__init__(consumed)
        self.value = value
        self.text = text if text is not None else str(value)

    def __repr__(self):
        return f"BencodeInt({self.value})"


class BencodeString(BencodeType):
    """Represents a Bencoded byte string."""
    kind = BencodeKind.STRING

    def __init__(self, value: bytes, encoded: bytes = None, consumed: int = 0):
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError("BencodeString requires bytes.")
        super().__init__(consumed)
        self.value = bytes(value)
        # original span: <len>:<payload>
        self.encoded = encoded if encoded is not None else str(len(self.value)).encode() + b":" + self.value

    @property
    def length(self) -> int:
        return len(self.value)

    @property
    def text(self) -> str:
        return self.value.decode("utf-8", errors="replace")

    def __repr__(self):
        return f"BencodeString({self.value!r})"


class BencodeBlob(BencodeType):
    """
    Represents an opaque binary payload, such as the SHA-1 piece hashes of a
    metafile. Same shape as a string but never interpreted as text.
    """
    kind = BencodeKind.BLOB

    def __init__(self, value: bytes, consumed: int = 0):
        if not isinstance(value, (bytes, bytearray)):
            raise TypeError("BencodeBlob requires bytes.")
        super().__init__(consumed)
        self.value = bytes(value)

    @property
    def length(self) -> int:
        return len(self.value)

    def hex(self) -> str:
        return self.value.hex()

    def __repr__(self):
        return f"BencodeBlob(<{len(self.value)} bytes>)"


def _adopt(owner: BencodeType, node) -> None:
    if not isinstance(node, BencodeType) or isinstance(node, BencodeInvalid):
        raise TypeError(f"Cannot store {type(node).__name__} in a bencode container.")
    if node.owner is not None:
        raise ValueError(f"{node!r} already belongs to another container.")
    if node is owner:
        raise ValueError("A container cannot contain itself.")
    node.owner = owner


class BencodeList(BencodeType):
    """Represents a Bencoded list."""
    kind = BencodeKind.LIST

    def __init__(self, value: list = None, consumed: int = 0):
        if value is not None and not isinstance(value, list):
            raise TypeError("BencodeList requires a list.")
        super().__init__(consumed)
        self.value = []
        for item in value or []:
            self.append(item)

    def append(self, node: BencodeType):
        _adopt(self, node)
        self.value.append(node)

    def children(self) -> list:
        return list(self.value)

    def _release_one(self) -> int:
        self.value.clear()
        return super()._release_one()

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def __getitem__(self, idx):
        return self.value[idx]

    def __repr__(self):
        return f"BencodeList({self.value!r})"


class BencodeDict(BencodeType):
    """
    Represents a Bencoded dictionary as ordered (key, value) pairs.

    Pairs keep the order they were encountered in. Keys are not sorted and
    duplicates are not rejected, so a decoded dictionary re-encodes to the
    exact bytes it came from.
    """
    kind = BencodeKind.DICT

    def __init__(self, pairs: list = None, consumed: int = 0):
        super().__init__(consumed)
        self.pairs = []
        for key, value in pairs or []:
            self.append(key, value)

    def append(self, key: BencodeString, value: BencodeType):
        # keys must be strings (bencode requirement)
        if not isinstance(key, BencodeString):
            raise TypeError("BencodeDict keys must be BencodeString.")
        _adopt(self, key)
        try:
            _adopt(self, value)
        except (TypeError, ValueError):
            key.owner = None
            raise
        self.pairs.append((key, value))

    def get(self, key, default=None):
        wanted = key.encode() if isinstance(key, str) else bytes(key)
        for k, v in self.pairs:
            if k.value == wanted:
                return v
        return default

    def keys(self):
        return [k.value for k, _ in self.pairs]

    def values(self):
        return [v for _, v in self.pairs]

    def items(self):
        return list(self.pairs)

    def children(self) -> list:
        return [node for pair in self.pairs for node in pair]

    def _release_one(self) -> int:
        self.pairs.clear()
        return super()._release_one()

    def __contains__(self, key):
        return self.get(key) is not None

    def __len__(self):
        return len(self.pairs)

    def __iter__(self):
        return iter(self.keys())

    def __repr__(self):
        inner = ", ".join(f"{k.value!r}: {v!r}" for k, v in self.pairs)
        return f"BencodeDict({{{inner}}})"


class BencodeInvalid(BencodeType):
    """Sentinel for an unrecognised lead byte. Never part of a decoded tree."""
    kind = BencodeKind.INVALID

    def __init__(self, position: int, lead: bytes = b""):
        super().__init__(0)
        self.position = position
        self.lead = lead

    def release(self) -> int:
        return 0

    def __repr__(self):
        return f"BencodeInvalid(position={self.position}, lead={self.lead!r})"
