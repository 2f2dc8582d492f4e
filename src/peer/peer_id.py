"""
Peer ID generation for the BitTorrent handshake and tracker announce.
"""
import hashlib

PEER_ID_PREFIX = b"-GS0001-"   # client identifier, 8 bytes
PEER_ID_LEN = 20


def generate_peer_id(seed, out: bytearray = None) -> bytes:
    """
    Derive a 20-byte peer id from seed: the fixed 8-byte client prefix
    followed by the first 12 bytes of SHA-1(seed).
    The same seed always yields the same id. When out is given it is
    filled in place.
    """
    if isinstance(seed, str):
        seed = seed.encode()

    digest = hashlib.sha1(seed).digest()
    peer_id = PEER_ID_PREFIX + digest[:PEER_ID_LEN - len(PEER_ID_PREFIX)]

    if out is not None:
        if len(out) != PEER_ID_LEN:
            raise ValueError(f"peer id buffer must be {PEER_ID_LEN} bytes, got {len(out)}")
        out[:] = peer_id

    return peer_id
