from pathlib import Path
import gzip
import hashlib
import logging
from .constants import REPO_DIR_NAME
from .errors import NotFoundError, UserInputError
from .models import Digest, FileMap
from .repo_utils import get_sprig_dir

logger = logging.getLogger(__name__)

def get_blobs_dir(root: Path) -> Path:
    return get_sprig_dir(root) / "blobs"

def get_content_hash(content: bytes) -> Digest:
    return hashlib.sha1(content).hexdigest()

def get_file_hash(filepath: Path) -> Digest:
    hasher = hashlib.sha1()
    with open(filepath, "rb") as f:
        while chunk := f.read(8192):
            hasher.update(chunk)
    return hasher.hexdigest()

def blob_exists(root: Path, blob_hash: Digest) -> bool:
    return (get_blobs_dir(root) / blob_hash).is_file()

def write_blob(root: Path, content: bytes) -> Digest:
    """Store ``content`` under its digest and return the digest.

    Writing content that is already present is a no-op, so callers may put
    the same bytes as often as they like.
    """
    blob_hash = get_content_hash(content)
    if blob_exists(root, blob_hash):
        return blob_hash
    dest_path = get_blobs_dir(root) / blob_hash
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = dest_path.with_suffix(".tmp")
    with gzip.open(tmp_path, "wb") as f_out:
        f_out.write(content)
    tmp_path.replace(dest_path)
    logger.debug("stored blob %s (%d bytes)", blob_hash, len(content))
    return blob_hash

def read_blob(root: Path, blob_hash: Digest) -> bytes:
    blob_path = get_blobs_dir(root) / blob_hash
    if not blob_path.is_file():
        raise NotFoundError(f"blob {blob_hash} does not exist")
    with gzip.open(blob_path, "rb") as f:
        return f.read()

def to_repo_path(root: Path, path: Path | str) -> str:
    """Normalize ``path`` (absolute, or relative to ``root``) to the posix key used in commits."""
    root = root.resolve()
    resolved = (root / path).resolve()
    if not resolved.is_relative_to(root) or resolved == root:
        raise UserInputError(f"{path} is outside the repository")
    return resolved.relative_to(root).as_posix()

def list_working_files(root: Path) -> FileMap:
    files = {}
    for path in root.rglob("*"):
        relative = path.relative_to(root)
        if relative.parts[0] == REPO_DIR_NAME or not path.is_file():
            continue
        files[relative.as_posix()] = get_file_hash(path)
    return files

def read_working_file(root: Path, repo_path: str) -> bytes:
    filepath = root / repo_path
    if not filepath.is_file():
        raise NotFoundError("File does not exist.")
    return filepath.read_bytes()

def write_working_file(root: Path, repo_path: str, content: bytes) -> None:
    filepath = root / repo_path
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_bytes(content)

def delete_working_file(root: Path, repo_path: str) -> None:
    filepath = root / repo_path
    if filepath.is_file():
        filepath.unlink()
    # prune directories the file leaves empty, never the root itself
    parent = filepath.parent
    while parent != root and parent.is_dir() and not any(parent.iterdir()):
        parent.rmdir()
        parent = parent.parent
