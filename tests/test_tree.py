import logging

import pytest

from bencoding import (NOT_FOUND, BencodeBlob, BencodeDict, BencodeInt, BencodeInvalid, BencodeList,
                       BencodeString, decode, destroy, encode, format_hex, format_tree, lookup,
                       lookup_dict, lookup_path, to_python, walk)


SAMPLE = (b"d8:announce3:url4:infod6:lengthi7e4:name5:a.txt"
          b"6:pieces4:\xde\xad\xbe\xefe4:tagsl1:x1:yee")


def test_lookup_present_returns_stored_node():
    root = decode(SAMPLE)
    info = lookup(root, "info")
    assert info is root.pairs[1][1]
    assert lookup(root, b"announce").text == "url"


def test_lookup_absent():
    root = decode(SAMPLE)
    result = lookup(root, "missing")
    assert result is NOT_FOUND
    assert not result
    assert repr(result) == "NOT_FOUND"


def test_lookup_requires_dict():
    with pytest.raises(TypeError):
        lookup(decode(b"le"), "a")


def test_lookup_first_duplicate_wins():
    root = decode(b"d1:ai1e1:ai2ee")
    assert lookup(root, "a").value == 1


def test_lookup_dict():
    root = decode(SAMPLE)
    assert isinstance(lookup_dict(root, "info"), BencodeDict)
    assert lookup_dict(root, "announce") is NOT_FOUND
    assert lookup_dict(root, "nope") is NOT_FOUND


def test_lookup_path():
    root = decode(SAMPLE)
    assert lookup_path(root, "info", "length").value == 7
    assert lookup_path(root, "info", "length", "deeper") is NOT_FOUND
    assert lookup_path(root, "info", "missing") is NOT_FOUND


def test_walk_preorder():
    root = decode(b"d1:ali1ei2ee1:bi3ee")
    seen = [(depth, key, type(node).__name__) for depth, key, node in walk(root)]
    assert seen == [
        (0, None, "BencodeDict"),
        (1, b"a", "BencodeList"),
        (2, None, "BencodeInt"),
        (2, None, "BencodeInt"),
        (1, b"b", "BencodeInt"),
    ]


def test_to_python():
    root = decode(SAMPLE)
    assert to_python(root) == {
        b"announce": b"url",
        b"info": {b"length": 7, b"name": b"a.txt", b"pieces": b"\xde\xad\xbe\xef"},
        b"tags": [b"x", b"y"],
    }


def test_format_hex():
    assert format_hex(b"Hello") == "48 65 6C 6C 6F"
    assert format_hex(b"\x00\x01\x02", limit=2) == "00 01 ..."
    assert format_hex(b"") == ""


def test_format_tree():
    text = format_tree(decode(SAMPLE))
    print(text)
    assert text.splitlines() == [
        "announce: url",
        "info:",
        "  length: 7",
        "  name: a.txt",
        "  pieces: <blob 4 bytes> DE AD BE EF",
        "tags:",
        "  - x",
        "  - y",
    ]


def test_format_tree_scalar_root():
    assert format_tree(decode(b"i-3e")) == "-3"


def test_destroy_post_order():
    root = decode(SAMPLE)
    info = lookup(root, "info")
    pieces = lookup(info, "pieces")

    # root + 3 keys + announce + info (3 keys, 3 values) + tags (list + 2 items)
    assert destroy(root) == 1 + 3 + 1 + 1 + 6 + 1 + 2
    assert root.released and info.released and pieces.released
    assert len(root) == 0
    assert len(info) == 0


def test_destroy_twice(caplog):
    root = decode(b"le")
    assert destroy(root) == 1
    with caplog.at_level(logging.WARNING, logger="bencoding.tree"):
        assert destroy(root) == 0
    assert "already released" in caplog.text


def test_destroy_invalid_is_reported(caplog):
    with caplog.at_level(logging.ERROR, logger="bencoding.tree"):
        assert destroy(BencodeInvalid(3, b"x")) == 0
    assert "invalid node" in caplog.text


def test_released_node_cannot_be_encoded():
    root = decode(b"li1ee")
    destroy(root)
    with pytest.raises(ValueError):
        encode(root)


def test_encode_invalid_node():
    with pytest.raises(ValueError):
        encode(BencodeInvalid(0, b"x"))


def test_node_has_single_owner():
    item = BencodeInt(1)
    first = BencodeList([item])
    assert item.owner is first
    with pytest.raises(ValueError):
        BencodeList([item])


def test_dict_key_must_be_string():
    with pytest.raises(TypeError):
        BencodeDict([(BencodeInt(1), BencodeInt(2))])


def test_hand_built_tree_encodes():
    tree = BencodeDict([
        (BencodeString(b"b"), BencodeList([BencodeInt(1), BencodeString(b"x")])),
        (BencodeString(b"a"), BencodeBlob(b"\x00\x01")),
    ])
    # stored order is kept, not sorted
    assert encode(tree) == b"d1:bli1e1:xe1:a2:\x00\x01e"
