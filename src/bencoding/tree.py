"""
Queries and helpers over a decoded Bencode tree.
"""
import logging
from typing import Iterator, Optional, Tuple

from .structure import (BencodeBlob, BencodeDict, BencodeInt, BencodeInvalid,
                        BencodeList, BencodeString, BencodeType)

logger = logging.getLogger(__name__)

HEX_PREVIEW = 20  # bytes of a blob shown by format_tree


class _NotFound:
    """Result of a lookup for a key that is not present."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


def _key_bytes(key) -> bytes:
    if isinstance(key, str):
        return key.encode()
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    if isinstance(key, BencodeString):
        return key.value
    raise TypeError(f"Lookup key must be str or bytes, got {type(key)}")


# --------------------------
# Lookup
# --------------------------

def lookup(d: BencodeDict, key):
    """
    Returns the value stored under key, or NOT_FOUND.
    Scans the pairs in order, so the first of duplicate keys wins.
    """
    if not isinstance(d, BencodeDict):
        raise TypeError(f"lookup requires a BencodeDict, got {type(d).__name__}")

    wanted = _key_bytes(key)
    for k, v in d.pairs:
        if k.value == wanted:
            return v
    return NOT_FOUND


def lookup_dict(d: BencodeDict, key):
    """Like lookup, but only a dictionary value counts as a match."""
    value = lookup(d, key)
    if isinstance(value, BencodeDict):
        return value
    return NOT_FOUND


def lookup_path(d: BencodeDict, *keys):
    """Follows keys through nested dictionaries, e.g. lookup_path(root, "info", "name")."""
    node = d
    for key in keys:
        if not isinstance(node, BencodeDict):
            return NOT_FOUND
        node = lookup(node, key)
        if node is NOT_FOUND:
            return NOT_FOUND
    return node


# --------------------------
# Traversal
# --------------------------

def walk(node: BencodeType, depth: int = 0, key: Optional[bytes] = None) -> Iterator[Tuple[int, Optional[bytes], BencodeType]]:
    """Pre-order traversal yielding (depth, key, node). List items have key None."""
    yield depth, key, node

    if isinstance(node, BencodeList):
        for item in node.value:
            yield from walk(item, depth + 1)
    elif isinstance(node, BencodeDict):
        for k, v in node.pairs:
            yield from walk(v, depth + 1, k.value)


def to_python(node: BencodeType):
    """Converts a tree into plain ints, bytes, lists and dicts."""
    if isinstance(node, BencodeInt):
        return node.value

    if isinstance(node, (BencodeString, BencodeBlob)):
        return node.value

    if isinstance(node, BencodeList):
        return [to_python(x) for x in node.value]

    if isinstance(node, BencodeDict):
        result = {}
        for k, v in node.pairs:
            result.setdefault(k.value, to_python(v))
        return result

    raise TypeError(f"Cannot convert node of type {type(node).__name__}")


# --------------------------
# Display
# --------------------------

def format_hex(data: bytes, limit: Optional[int] = None) -> str:
    """Formats bytes as uppercase, space separated hex (e.g. "48 65 6C")."""
    shown = data if limit is None else data[:limit]
    text = " ".join(f"{b:02X}" for b in shown)
    if limit is not None and len(data) > limit:
        text += " ..."
    return text


def _scalar(node: BencodeType) -> Optional[str]:
    if isinstance(node, BencodeInt):
        return node.text
    if isinstance(node, BencodeString):
        return node.text
    if isinstance(node, BencodeBlob):
        return f"<blob {node.length} bytes> {format_hex(node.value, HEX_PREVIEW)}".rstrip()
    if isinstance(node, (BencodeList, BencodeDict)):
        return None
    raise TypeError(f"Cannot format node of type {type(node).__name__}")


def _format(node: BencodeType, level: int, indent: int, lines: list):
    pad = " " * (indent * level)

    if isinstance(node, BencodeList):
        for item in node.value:
            text = _scalar(item)
            if text is None:
                lines.append(f"{pad}-")
                _format(item, level + 1, indent, lines)
            else:
                lines.append(f"{pad}- {text}")
        return

    if isinstance(node, BencodeDict):
        for k, v in node.pairs:
            text = _scalar(v)
            if text is None:
                lines.append(f"{pad}{k.text}:")
                _format(v, level + 1, indent, lines)
            else:
                lines.append(f"{pad}{k.text}: {text}")
        return

    lines.append(f"{pad}{_scalar(node)}")


def format_tree(node: BencodeType, indent: int = 2) -> str:
    """Renders a tree as indented text, one scalar per line."""
    lines = []
    _format(node, 0, indent, lines)
    return "\n".join(lines)


# --------------------------
# Release
# --------------------------

def destroy(node: BencodeType) -> int:
    """
    Releases a tree, children before their container.
    Returns the number of nodes released.
    """
    if isinstance(node, BencodeInvalid):
        logger.error("Refusing to destroy invalid node %r", node)
        return 0
    if not isinstance(node, BencodeType):
        raise TypeError(f"Cannot destroy object of type {type(node).__name__}")
    if node.released:
        logger.warning("Node %r was already released", node)
        return 0

    return node.release()
