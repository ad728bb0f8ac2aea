"""
Directory content fingerprints.

Used only to decide whether two bundle trees are the same; not a security
primitive.
"""

import hashlib
import logging
import os
import stat
from pathlib import Path
from typing import List, Tuple, Union

from ..core.exceptions import DigestError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

_FILE = b"F"
_DIR = b"D"
_LINK = b"L"
_SPECIAL = b"S"


def _entries(root: Path) -> List[Tuple[str, Path]]:
    """All entries below ``root`` as (posix relative path, path), sorted.

    Raises:
        DigestError: if any directory in the tree cannot be listed.
    """

    def _raise(error: OSError) -> None:
        raise DigestError(
            str(root), f"cannot list '{error.filename}': {error.strerror or error}"
        ) from error

    entries: List[Tuple[str, Path]] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise, followlinks=False):
        current = Path(dirpath)
        for name in dirnames + filenames:
            path = current / name
            entries.append((path.relative_to(root).as_posix(), path))
    entries.sort(key=lambda item: item[0])
    return entries


def _update(sha: "hashlib._Hash", kind: bytes, relative: str, payload: bytes = b"") -> None:
    encoded = relative.encode("utf-8", "surrogateescape")
    # Length prefixes keep (name, content) boundaries unambiguous
    sha.update(kind)
    sha.update(len(encoded).to_bytes(8, "big"))
    sha.update(encoded)
    sha.update(len(payload).to_bytes(8, "big"))
    sha.update(payload)


def directory_digest(path: Union[str, Path]) -> str:
    """SHA-256 over the relative paths and contents of a directory tree.

    Entries are visited in sorted relative-path order so the result does not
    depend on traversal order or timestamps. Symlinks are hashed by their
    target text and never followed.

    Raises:
        DigestError: if ``path`` is not a directory, contains nothing, or
            holds an entry that cannot be listed or read.
    """
    root = Path(path)
    if not root.is_dir():
        raise DigestError(str(root), "not a directory")

    entries = _entries(root)
    if not entries:
        raise DigestError(str(root), "directory is empty")

    sha = hashlib.sha256()
    for relative, entry in entries:
        try:
            mode = entry.lstat().st_mode
            if stat.S_ISLNK(mode):
                _update(sha, _LINK, relative, os.readlink(entry).encode("utf-8", "surrogateescape"))
            elif stat.S_ISDIR(mode):
                _update(sha, _DIR, relative)
            elif stat.S_ISREG(mode):
                file_sha = hashlib.sha256()
                with open(entry, "rb") as f:
                    for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                        file_sha.update(chunk)
                _update(sha, _FILE, relative, file_sha.digest())
            else:
                # FIFOs, sockets and device nodes are never opened
                _update(sha, _SPECIAL, relative, stat.S_IFMT(mode).to_bytes(4, "big"))
        except OSError as e:
            raise DigestError(str(root), f"cannot read '{relative}': {e}") from e

    digest = sha.hexdigest()
    logger.debug(f"Digest of '{root}' over {len(entries)} entries: {digest}")
    return digest
