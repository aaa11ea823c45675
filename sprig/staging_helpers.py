import logging
from .errors import PreconditionError
from .models import Digest, FileMap, StagingInfo, StatusReport

logger = logging.getLogger(__name__)

def stage(staging: StagingInfo, path: str, blob_hash: Digest, head_files: FileMap) -> None:
    """Stage ``blob_hash`` for ``path``.

    Staging the exact content the head commit already tracks is not a change:
    any previous staged entry for the path is dropped instead.
    """
    if path in staging.removed:
        staging.removed.remove(path)
    if head_files.get(path) == blob_hash:
        staging.staged.pop(path, None)
        return
    staging.staged[path] = blob_hash
    logger.debug("staged %s as %s", path, blob_hash)

def unstage(staging: StagingInfo, path: str) -> None:
    staging.staged.pop(path, None)

def mark_removed(staging: StagingInfo, path: str, head_files: FileMap) -> bool:
    """Unstage ``path`` and, if the head tracks it, schedule it for removal.

    Returns True when the path was scheduled, i.e. the working copy should go too.
    """
    is_staged = path in staging.staged
    is_tracked = path in head_files
    if not is_staged and not is_tracked:
        raise PreconditionError("No reason to remove the file.")
    unstage(staging, path)
    if is_tracked and path not in staging.removed:
        staging.removed.append(path)
        staging.removed.sort()
    return is_tracked

def has_pending_changes(staging: StagingInfo) -> bool:
    return bool(staging.staged or staging.removed)

def clear_staging(staging: StagingInfo) -> None:
    staging.staged.clear()
    staging.removed.clear()

def apply_staging(head_files: FileMap, staging: StagingInfo) -> FileMap:
    files = {path: blob for path, blob in head_files.items() if path not in staging.removed}
    files.update(staging.staged)
    return files

def classify(staging: StagingInfo, head_files: FileMap, working_files: FileMap) -> StatusReport:
    tracked = [path for path in head_files if path not in staging.removed]
    modified = {}
    for path in tracked:
        if path in staging.staged:
            continue
        if path not in working_files:
            modified[path] = "deleted"
        elif working_files[path] != head_files[path]:
            modified[path] = "modified"
    for path, blob_hash in staging.staged.items():
        if path not in working_files:
            modified[path] = "deleted"
        elif working_files[path] != blob_hash:
            modified[path] = "modified"
    tracked_set = set(tracked)
    untracked = [
        path for path in working_files
        if path not in tracked_set and path not in staging.staged
    ]
    return StatusReport(
        staged=sorted(staging.staged),
        removed=sorted(staging.removed),
        tracked=sorted(tracked),
        modified=dict(sorted(modified.items())),
        untracked=sorted(untracked),
    )
