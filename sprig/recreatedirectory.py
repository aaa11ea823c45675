from pathlib import Path
import logging
from .constants import CONFLICT_END, CONFLICT_SEPARATOR, CONFLICT_START
from .file_helpers import (
    delete_working_file,
    get_file_hash,
    read_blob,
    write_working_file,
)
from .models import FileMap

logger = logging.getLogger(__name__)


def untracked_in_the_way(untracked: list[str], paths) -> list[str]:
    targets = set(paths)
    return sorted(path for path in untracked if path in targets)

def checkout_blob(root: Path, path: str, blob_hash: str) -> None:
    filepath = root / path
    if filepath.is_file() and get_file_hash(filepath) == blob_hash:
        return
    write_working_file(root, path, read_blob(root, blob_hash))

def recreate_directory(root: Path, from_files: FileMap, to_files: FileMap) -> None:
    """Make the working tree match ``to_files``.

    Files tracked in ``from_files`` but absent from ``to_files`` are deleted;
    files neither mapping knows about are left untouched.
    """
    # deletions first: a dropped file may sit where a target directory goes, or the reverse
    for filepath in from_files:
        if filepath not in to_files:
            delete_working_file(root, filepath)
    for filepath, blob_hash in to_files.items():
        checkout_blob(root, filepath, blob_hash)
    logger.debug("working tree synced: %d files written, %d candidates removed",
                 len(to_files), len(set(from_files) - set(to_files)))

def conflict_content(current: bytes | None, given: bytes | None) -> bytes:
    return CONFLICT_START + (current or b"") + CONFLICT_SEPARATOR + (given or b"") + CONFLICT_END

def write_conflict_file(root: Path, path: str, current: bytes | None, given: bytes | None) -> bytes:
    content = conflict_content(current, given)
    write_working_file(root, path, content)
    return content
