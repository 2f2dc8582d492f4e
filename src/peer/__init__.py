from .peer_id import PEER_ID_LEN, PEER_ID_PREFIX, generate_peer_id

__all__ = [
    "generate_peer_id",
    "PEER_ID_PREFIX",
    "PEER_ID_LEN",
]
