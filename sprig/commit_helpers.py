from pathlib import Path
import logging
import re
import time
from .constants import HASH_LENGTH, ROOT_COMMIT_MESSAGE, ROOT_COMMIT_TIMESTAMP
from .errors import NotFoundError, UserInputError
from .models import CommitInfo, Digest, FileMap
from .repo_utils import Repository, get_sprig_dir

logger = logging.getLogger(__name__)

HEX_PREFIX = re.compile(rf"[0-9a-f]{{1,{HASH_LENGTH}}}")

def get_commits_dir(root: Path) -> Path:
    return get_sprig_dir(root) / "commits"

def make_commit(message: str, files: FileMap, parents: list[Digest], timestamp: int | None = None) -> CommitInfo:
    if not message:
        raise UserInputError("Please enter a commit message.")
    if len(parents) > 2:
        raise UserInputError("a commit has at most two parents")
    return CommitInfo(
        commitMessage = message,
        timestamp = int(time.time()) if timestamp is None else timestamp,
        parentCommits = list(parents),
        files = dict(files),
    )

def root_commit() -> CommitInfo:
    # fixed fields, so every repository shares the same root id
    return CommitInfo(
        commitMessage = ROOT_COMMIT_MESSAGE,
        timestamp = ROOT_COMMIT_TIMESTAMP,
        parentCommits = [],
        files = {},
    )

def update_commit_info(root: Path, info: CommitInfo) -> Digest:
    commit_hash = info.id
    commit_path = get_commits_dir(root) / f"{commit_hash}.json"
    if commit_path.exists():
        return commit_hash    # commits are write-once
    commit_path.parent.mkdir(parents=True, exist_ok=True)
    commit_path.write_text(info.model_dump_json(indent=4))
    logger.debug("wrote commit %s", commit_hash)
    return commit_hash

def list_commit_hashes(root: Path) -> list[Digest]:
    commits_dir = get_commits_dir(root)
    if not commits_dir.exists():
        return []
    return sorted(path.stem for path in commits_dir.glob("*.json"))

def resolve_commit_hash(root: Path, commit_hash: str) -> Digest:
    """Expand a full or abbreviated commit id to the full id."""
    if not HEX_PREFIX.fullmatch(commit_hash):
        raise NotFoundError("No commit with that id exists.")
    if len(commit_hash) == HASH_LENGTH:
        if (get_commits_dir(root) / f"{commit_hash}.json").exists():
            return commit_hash
        raise NotFoundError("No commit with that id exists.")
    matches = [h for h in list_commit_hashes(root) if h.startswith(commit_hash)]
    if not matches:
        raise NotFoundError("No commit with that id exists.")
    if len(matches) > 1:
        raise UserInputError(f"commit id {commit_hash} is ambiguous")
    return matches[0]

def get_commit_info(root: Path, commit_hash: str) -> CommitInfo:
    full_hash = resolve_commit_hash(root, commit_hash)
    commit_path = get_commits_dir(root) / f"{full_hash}.json"
    return CommitInfo.model_validate_json(commit_path.read_text())

def current_commit_hash(repo: Repository) -> Digest:
    return repo.active_branch.head

def current_commit_info(repo: Repository) -> CommitInfo:
    return get_commit_info(repo.root, current_commit_hash(repo))
