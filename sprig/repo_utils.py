from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator
import logging
import os
from .constants import REPO_DIR_NAME, STATE_FILE
from .errors import NotFoundError, UserInputError
from .models import BranchInfo, RepoState

logger = logging.getLogger(__name__)

@dataclass
class Repository:
    """A repository root and its loaded state, passed explicitly to every operation."""
    root: Path
    state: RepoState

    @property
    def active_branch(self) -> BranchInfo:
        return get_branch(self.state, self.state.activeBranch)

def get_sprig_dir(root: Path) -> Path:
    return root / REPO_DIR_NAME

def get_state_path(root: Path) -> Path:
    return get_sprig_dir(root) / STATE_FILE

def find_sprig_root_dir(start: Path | None = None) -> Path | None:
    start = (start or Path.cwd()).resolve()
    for directory in [start] + list(start.parents):
        if (directory / REPO_DIR_NAME).is_dir():
            return directory
        if directory == Path.home():    # won't look past home directory
            return None
    return None

def get_branch(state: RepoState, branch_name: str) -> BranchInfo:
    if branch_name not in state.branches:
        raise NotFoundError("No such branch exists.")
    return state.branches[branch_name]

def load_state(root: Path) -> RepoState:
    state_path = get_state_path(root)
    if not state_path.exists():
        raise UserInputError("Not in an initialized Sprig directory.")
    return RepoState.model_validate_json(state_path.read_text())

def save_state(root: Path, state: RepoState) -> None:
    state_path = get_state_path(root)
    tmp_path = state_path.with_suffix(".tmp")
    tmp_path.write_text(state.model_dump_json(indent=4))
    # os.replace is atomic, so readers see the old state or the new one, never a mix
    os.replace(tmp_path, state_path)
    logger.debug("saved repository state (active branch %s)", state.activeBranch)

def open_repository(start: Path | None = None) -> Repository:
    root = find_sprig_root_dir(start)
    if root is None:
        raise UserInputError("Not in an initialized Sprig directory.")
    return Repository(root=root, state=load_state(root))

@contextmanager
def transaction(repo: Repository) -> Iterator[RepoState]:
    """Yield a private copy of the repository state and persist it on success.

    If the body raises, the copy is discarded and neither the in-memory nor
    the on-disk state changes.
    """
    working = repo.state.model_copy(deep=True)
    yield working
    save_state(repo.root, working)
    repo.state = working
