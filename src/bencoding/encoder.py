"""
Bencode encoder for BitTorrent metainfo and tracker responses.
"""
from .structure import (BencodeBlob, BencodeDict, BencodeInt, BencodeInvalid,
                        BencodeList, BencodeString, BencodeType)


def encode(obj) -> bytes:
    """Encodes a Python object or BencodeType into bencoded bytes."""

    if isinstance(obj, BencodeType):
        return encode_node(obj)

    # bool is an int subclass but has no bencode form
    if isinstance(obj, bool):
        raise TypeError("Cannot bencode a bool")

    if isinstance(obj, int):
        return encode_int(obj)

    if isinstance(obj, str):
        return encode_str(obj)

    if isinstance(obj, (bytes, bytearray)):
        return encode_bytes(bytes(obj))

    if isinstance(obj, list):
        return encode_list(obj)

    if isinstance(obj, dict):
        return encode_dict(obj)

    raise TypeError(f"Cannot bencode object of type {type(obj)}")


def encode_node(node: BencodeType) -> bytes:
    """
    Re-encodes a decoded tree, keeping dictionary pairs in stored order.
    Works from an explicit stack, so nesting depth is not limited.
    """
    out = []
    stack = [node]

    while stack:
        item = stack.pop()

        # container terminators queued behind their children
        if isinstance(item, bytes):
            out.append(item)
            continue

        if isinstance(item, BencodeInvalid):
            raise ValueError(f"Cannot bencode an invalid node: {item!r}")
        if not isinstance(item, BencodeType):
            raise TypeError(f"Cannot bencode node of type {type(item)}")
        if item.released:
            raise ValueError(f"Cannot bencode a released node: {item!r}")

        if isinstance(item, BencodeInt):
            out.append(encode_int(item.value))

        # blobs go out as their raw bytes, same framing as a string
        elif isinstance(item, (BencodeString, BencodeBlob)):
            out.append(encode_bytes(item.value))

        elif isinstance(item, BencodeList):
            out.append(b"l")
            stack.append(b"e")
            stack.extend(reversed(item.value))

        elif isinstance(item, BencodeDict):
            out.append(b"d")
            stack.append(b"e")
            for k, v in reversed(item.pairs):
                stack.append(v)
                stack.append(k)

        else:
            raise TypeError(f"Cannot bencode node of type {type(item)}")

    return b"".join(out)


# ------------------------------------------------------------
#   Encoding primitives
# ------------------------------------------------------------

def encode_int(n: int) -> bytes:
    """Encodes an integer to bencoded bytes (e.g., i123e)."""
    return f"i{n}e".encode()


def encode_bytes(b: bytes) -> bytes:
    """Encodes bytes to bencoded bytes (e.g., 4:spam)."""
    return str(len(b)).encode() + b":" + b


def encode_str(s: str) -> bytes:
    """Encodes a string to bencoded bytes (e.g., 4:spam)."""
    b = s.encode()
    return encode_bytes(b)


def encode_list(lst: list) -> bytes:
    """Encodes a list to bencoded bytes (e.g., l4:spame)."""
    encoded_items = b''.join(encode(x) for x in lst)
    return b"l" + encoded_items + b"e"


def encode_dict(d: dict) -> bytes:
    """Encodes a dictionary to bencoded bytes (e.g., d3:cow3:moo4:spam4:eggse)."""
    result = b"d"

    def key_to_bytes(k):
        if isinstance(k, (bytes, bytearray)):
            return bytes(k)
        if isinstance(k, str):
            return k.encode()
        raise TypeError(f"Dictionary keys must be str or bytes, got {type(k)}")

    for key in sorted(d.keys(), key=key_to_bytes):
        key_bytes = key_to_bytes(key)
        result += encode_bytes(key_bytes)
        result += encode(d[key])

    return result + b"e"
