import hashlib

import pytest

from peer.peer_id import PEER_ID_PREFIX, generate_peer_id


def test_peer_id_layout():
    peer_id = generate_peer_id("my-client-seed")
    print("Peer id:", peer_id)

    assert len(peer_id) == 20
    assert peer_id[:8] == b"-GS0001-" == PEER_ID_PREFIX
    assert peer_id[8:] == hashlib.sha1(b"my-client-seed").digest()[:12]


def test_peer_id_deterministic():
    assert generate_peer_id("seed") == generate_peer_id(b"seed")
    assert generate_peer_id("seed") != generate_peer_id("other seed")


def test_peer_id_fills_buffer():
    out = bytearray(20)
    peer_id = generate_peer_id("seed", out)
    assert bytes(out) == peer_id


def test_peer_id_buffer_size():
    with pytest.raises(ValueError):
        generate_peer_id("seed", bytearray(8))
