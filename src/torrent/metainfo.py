import hashlib
from pathlib import Path

from bencoding import (NOT_FOUND, BencodeBlob, BencodeDict, BencodeInt, BencodeList,
                       BencodeString, decode, encode, lookup, lookup_dict)

HASH_LEN = 20  # SHA-1 digest per piece


def _text(node):
    return node.value.decode() if isinstance(node, BencodeString) else None


def _int(node, field: str) -> int:
    if not isinstance(node, BencodeInt):
        raise ValueError(f"Torrent field '{field}' must be an integer")
    return node.value


class TorrentMeta:
    def __init__(self, path: Path = None, raw: bytes = None):
        self.path = Path(path) if path is not None else None

        # Load raw bytes
        if raw is None:
            raw = self.path.read_bytes()

        # Decode full torrent structure; 'pieces' comes back as a blob
        root = decode(raw)
        if not isinstance(root, BencodeDict):
            raise ValueError("Invalid torrent: root must be a dictionary")

        self.root = root

        # ------------------ INFO ------------------
        info = lookup_dict(root, "info")
        if info is NOT_FOUND:
            raise ValueError("Torrent missing 'info' dictionary")

        self.info = info

        # The info dict keeps its pairs in file order, so re-encoding yields
        # the exact bytes the info hash is defined over.
        self.info_bytes = encode(info)
        self.info_hash = hashlib.sha1(self.info_bytes).digest()

        # ------------------ NAME ------------------
        self.name = _text(lookup(info, "name"))

        # ------------------ ANNOUNCE URL ------------------
        self.announce = _text(lookup(root, "announce"))

        # ------------------ ANNOUNCE-LIST ------------------
        self.announce_list = None
        ann_list_b = lookup(root, "announce-list")

        if isinstance(ann_list_b, BencodeList):
            tiers = []
            for tier in ann_list_b:
                if not isinstance(tier, BencodeList):
                    continue
                urls = [u.value.decode() for u in tier if isinstance(u, BencodeString)]
                if urls:
                    tiers.append(urls)
            if tiers:
                self.announce_list = tiers

        # ------------------ PIECE LENGTH ------------------
        self.piece_length = _int(lookup(info, "piece length"), "piece length")

        # ------------------ PIECES ------------------
        pieces_b = lookup(info, "pieces")
        if not isinstance(pieces_b, BencodeBlob):
            raise ValueError("Torrent missing 'pieces' hashes")
        raw_pieces = pieces_b.value
        if len(raw_pieces) % HASH_LEN:
            raise ValueError(f"'pieces' length {len(raw_pieces)} is not a multiple of {HASH_LEN}")
        self.pieces = [raw_pieces[i:i+HASH_LEN] for i in range(0, len(raw_pieces), HASH_LEN)]

        # ------------------ FILES ------------------
        files_b = lookup(info, "files")
        if isinstance(files_b, BencodeList):
            self.files = []
            for entry in files_b:
                if not isinstance(entry, BencodeDict):
                    raise ValueError("Torrent file entry must be a dictionary")
                length = _int(lookup(entry, "length"), "length")
                path_b = lookup(entry, "path")
                if not isinstance(path_b, BencodeList):
                    raise ValueError("Torrent file entry missing 'path' list")
                parts = [p.value.decode() for p in path_b]
                self.files.append({"length": length, "path": "/".join(parts)})
        else:
            length = _int(lookup(info, "length"), "length")
            self.files = [{"length": length, "path": self.name}]

        self.total_length = sum(f["length"] for f in self.files)
        self.is_multi = isinstance(files_b, BencodeList)
        self.is_single = not self.is_multi
        self.num_pieces = len(self.pieces)
        self.last_piece_length = (self.total_length % self.piece_length) or self.piece_length

    @classmethod
    def from_bytes(cls, raw: bytes) -> "TorrentMeta":
        return cls(raw=raw)

    def __repr__(self):
        return (
            f"TorrentMeta(name={self.name!r}, files={len(self.files)}, pieces={self.num_pieces}, "
            f"multi={self.is_multi}, announce={self.announce!r})"
        )
