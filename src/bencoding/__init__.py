"""
Bencoding package for decoding BitTorrent data into a tree and encoding it back.
"""
from .context import BINARY_KEYS, ParserContext
from .decoder import BencodeDecoder, decode, type_to_decode
from .encoder import encode
from .errors import BencodeDecodeError, FormatError, KeyTypeError
from .structure import (BencodeBlob, BencodeDict, BencodeInt, BencodeInvalid,
                        BencodeKind, BencodeList, BencodeString, BencodeType)
from .tree import NOT_FOUND, destroy, format_hex, format_tree, lookup, lookup_dict, lookup_path, to_python, walk

__all__ = [
    'decode', 'encode', 'BencodeDecoder', 'ParserContext', 'BINARY_KEYS', 'type_to_decode',
    'BencodeKind', 'BencodeType', 'BencodeInt', 'BencodeString', 'BencodeBlob', 'BencodeList',
    'BencodeDict', 'BencodeInvalid',
    'BencodeDecodeError', 'FormatError', 'KeyTypeError',
    'NOT_FOUND', 'lookup', 'lookup_dict', 'lookup_path', 'walk', 'to_python', 'format_hex',
    'format_tree', 'destroy',
]
