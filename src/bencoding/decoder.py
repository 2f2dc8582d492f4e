"""
Bencode decoder for BitTorrent metainfo and tracker responses.

Each decoder takes the whole buffer plus the absolute position of the value's
lead byte and returns a node whose ``consumed`` tells the caller how far to
advance. Binary-Payload Mode lives in the ParserContext handed down through
every call, never in module state.
"""
import logging
import re

from .context import ParserContext
from .errors import BencodeDecodeError, FormatError, KeyTypeError
from .structure import (BencodeBlob, BencodeDict, BencodeInt, BencodeInvalid,
                        BencodeKind, BencodeList, BencodeString)

logger = logging.getLogger(__name__)

_INT_RE = re.compile(rb"-?[0-9]+")


# --------------------------
# Type dispatcher
# --------------------------

def type_to_decode(lead) -> BencodeKind:
    """Maps the lead byte of a value to the variant that must decode it."""
    if isinstance(lead, (bytes, bytearray)):
        if len(lead) != 1:
            return BencodeKind.INVALID
        lead = lead[0]

    if lead == 0x69:  # i
        return BencodeKind.INTEGER
    if 0x30 <= lead <= 0x39:  # 0-9
        return BencodeKind.STRING
    if lead == 0x6C:  # l
        return BencodeKind.LIST
    if lead == 0x64:  # d
        return BencodeKind.DICT
    return BencodeKind.INVALID


def _invalid(data: bytes, pos: int) -> FormatError:
    lead = data[pos:pos + 1]
    if not lead:
        return FormatError("Unexpected end of input", pos)
    return FormatError("Invalid token", pos, lead, invalid=BencodeInvalid(pos, lead))


def _abandon(node, what: str) -> None:
    released = node.release()
    logger.debug("Released %d node(s) of partially decoded %s", released, what)


# --------------------------
# Scalar decoders
# --------------------------

def decode_integer(data: bytes, pos: int) -> BencodeInt:
    """Parses i<digits>e starting at pos."""
    end = data.find(b"e", pos + 1)
    if end == -1:
        raise FormatError("Unterminated integer", pos, data[pos:pos + 1])

    body = data[pos + 1:end]
    if not _INT_RE.fullmatch(body):
        raise FormatError("Invalid integer format", pos + 1, body)

    # i0e is the only form allowed to start with 0; i-0e is not allowed at all
    if body.startswith(b"-0") or (body.startswith(b"0") and len(body) > 1):
        raise FormatError("Leading zero in integer", pos + 1, body)

    return BencodeInt(int(body), body.decode("ascii"), consumed=end + 1 - pos)


def decode_string(data: bytes, pos: int, ctx: ParserContext, is_key: bool = False):
    """
    Parses <length>:<payload> starting at pos.

    Returns a BencodeBlob when the context has Binary-Payload Mode pending
    (and clears it), otherwise a BencodeString. Keys are never blobs; a key
    listed in ctx.binary_keys arms the mode for the value that follows.
    """
    colon = data.find(b":", pos)
    if colon == -1:
        raise FormatError("Missing ':' in string", pos, data[pos:pos + 1])

    length_bytes = data[pos:colon]
    if not _INT_RE.fullmatch(length_bytes):
        raise FormatError("Invalid string length", pos, length_bytes)

    length = int(length_bytes)
    if length < 0:
        raise FormatError("Negative string length", pos, length_bytes)

    start = colon + 1
    end = start + length
    if end > len(data):
        raise FormatError(f"Truncated string, expected {length} bytes", start, length_bytes)

    payload = data[start:end]
    consumed = end - pos

    if not is_key and ctx.take_binary():
        return BencodeBlob(payload, consumed=consumed)

    if is_key:
        ctx.arm(payload)

    return BencodeString(payload, encoded=data[pos:end], consumed=consumed)


# --------------------------
# Container decoders
# --------------------------

def _container_name(node) -> str:
    return "list" if isinstance(node, BencodeList) else "dictionary"


def _attach(frame: list, value) -> None:
    node, _, key = frame
    if isinstance(node, BencodeList):
        node.append(value)
    else:
        node.append(key, value)
        frame[2] = None


def _decode_container(data: bytes, pos: int, ctx: ParserContext, container):
    """
    Parses a list or dictionary starting at pos.

    Nesting is tracked with an explicit stack of open containers, one frame
    per level: [node, start, key waiting for its value]. A container is
    attached to its parent only once its terminator has been seen.
    """
    root = container()
    stack = [[root, pos, None]]
    idx = pos + 1  # skip 'l' / 'd'

    try:
        while True:
            frame = stack[-1]
            node, start, key = frame
            lead = data[idx:idx + 1]

            if not lead:
                raise FormatError(f"Unterminated {_container_name(node)}", start, data[start:start + 1])

            if lead == b"e" and key is None:
                node.consumed = idx + 1 - start  # include 'e'
                idx += 1
                stack.pop()
                if not stack:
                    return node
                _attach(stack[-1], node)
                continue

            kind = type_to_decode(lead)

            if isinstance(node, BencodeDict) and key is None:
                # keys MUST be strings
                if kind is BencodeKind.INVALID:
                    raise _invalid(data, idx)
                if kind is not BencodeKind.STRING:
                    raise KeyTypeError(f"Dictionary key must be a string, got {kind.name.lower()}", idx, lead)

                key = decode_string(data, idx, ctx, is_key=True)
                frame[2] = key
                idx += key.consumed

                # the mode only ever applies to a string paired directly with the key
                if ctx.binary_next and type_to_decode(data[idx:idx + 1]) is not BencodeKind.STRING:
                    ctx.binary_next = False
                continue

            if kind is BencodeKind.LIST:
                stack.append([BencodeList(), idx, None])
                idx += 1
            elif kind is BencodeKind.DICT:
                stack.append([BencodeDict(), idx, None])
                idx += 1
            else:
                value = _decode_scalar(data, idx, ctx, kind)
                _attach(frame, value)
                idx += value.consumed
    except BencodeDecodeError:
        # innermost first; open containers are not yet owned by their parents
        for node, _, key in reversed(stack):
            if key is not None:
                key.release()
            _abandon(node, _container_name(node))
        raise


def decode_list(data: bytes, pos: int, ctx: ParserContext) -> BencodeList:
    """Parses l<values>e starting at pos."""
    return _decode_container(data, pos, ctx, BencodeList)


def decode_dict(data: bytes, pos: int, ctx: ParserContext) -> BencodeDict:
    """
    Parses d<key><value>...e starting at pos.

    Pairs are stored in the order they appear; key ordering is not checked.
    """
    return _decode_container(data, pos, ctx, BencodeDict)


def _decode_scalar(data: bytes, pos: int, ctx: ParserContext, kind: BencodeKind):
    if kind is BencodeKind.INTEGER:
        return decode_integer(data, pos)

    if kind is BencodeKind.STRING:
        return decode_string(data, pos, ctx)

    raise _invalid(data, pos)


def decode_value(data: bytes, pos: int, ctx: ParserContext):
    """Dispatches on the lead byte at pos and decodes one value."""
    kind = type_to_decode(data[pos:pos + 1])

    if kind is BencodeKind.LIST:
        return decode_list(data, pos, ctx)

    if kind is BencodeKind.DICT:
        return decode_dict(data, pos, ctx)

    return _decode_scalar(data, pos, ctx, kind)


class BencodeDecoder:
    """
    Decodes one Bencoded document into a tree of Bencode nodes.
    """
    def __init__(self, data: bytes, context: ParserContext = None, strict: bool = False):
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"BencodeDecoder requires bytes, got {type(data).__name__}")
        self.data = bytes(data)
        self.i = 0  # cursor index
        self.ctx = context if context is not None else ParserContext()
        self.strict = strict

    def decode(self):
        """Main decode entry point. Decodes the value at the cursor."""
        try:
            result = decode_value(self.data, self.i, self.ctx)
        finally:
            # a pending mode must not carry over into the next decode with this context
            self.ctx.binary_next = False
        self.i += result.consumed

        if self.i != len(self.data):
            trailing = len(self.data) - self.i
            if self.strict:
                result.release()
                raise FormatError(f"{trailing} trailing byte(s) after root value", self.i,
                                  self.data[self.i:self.i + 1])
            logger.warning("Ignoring %d trailing byte(s) after root value at index %d", trailing, self.i)

        return result


def decode(data: bytes, strict: bool = False, binary_keys=None):
    """
    Convenience function to decode Bencoded data.
    binary_keys is a collection of keys (str or bytes); a single key is accepted too.
    """
    ctx = None
    if binary_keys is not None:
        if isinstance(binary_keys, (str, bytes, bytearray)):
            binary_keys = [binary_keys]
        keys = frozenset(k.encode() if isinstance(k, str) else bytes(k) for k in binary_keys)
        ctx = ParserContext(binary_keys=keys)
    return BencodeDecoder(data, ctx, strict=strict).decode()
