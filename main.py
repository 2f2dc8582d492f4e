import logging
from pathlib import Path
import sys
import os

sys.path.append(os.path.join(os.path.dirname(__file__), 'src'))

from bencoding import BencodeDecodeError, format_tree
from peer.peer_id import generate_peer_id
from torrent.metainfo import TorrentMeta

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%H:%M:%S'
)


def main(argv) -> int:
    if len(argv) != 2:
        print(f"usage: {argv[0]} <file.torrent>")
        return 2

    torrent_path = Path(argv[1])
    try:
        meta = TorrentMeta(torrent_path)
    except BencodeDecodeError as e:
        print(f"[Main] Could not decode {torrent_path}: {e}")
        return 1
    except (OSError, ValueError) as e:
        print(f"[Main] Could not load {torrent_path}: {e}")
        return 1

    print(format_tree(meta.root))
    print()
    print("name:", meta.name)
    print("announce:", meta.announce)
    print("announce_list:", meta.announce_list)
    print(f"pieces: {meta.num_pieces} x {meta.piece_length} bytes")
    print("Computed info_hash:", meta.info_hash.hex())

    peer_id = generate_peer_id(torrent_path.name)
    print("peer_id:", peer_id)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
