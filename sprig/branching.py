from pathlib import Path
import logging
from .constants import BRANCH_NAME_SEPARATOR
from .errors import NotFoundError, PreconditionError, UserInputError
from .graph_utils import reachable_from
from .models import BranchInfo, Digest, RepoState
from .repo_utils import get_branch

logger = logging.getLogger(__name__)

def _append_history(branch: BranchInfo, commit_hashes) -> None:
    known = set(branch.history)
    for commit_hash in commit_hashes:
        if commit_hash not in known:
            branch.history.append(commit_hash)
            known.add(commit_hash)

def add_commit(state: RepoState, branch_name: str, commit_hash: Digest) -> None:
    if branch_name not in state.branches:
        raise NotFoundError(f"branch '{branch_name}' does not exist")
    branch = state.branches[branch_name]
    _append_history(branch, [commit_hash])
    branch.head = commit_hash
    logger.info("branch %s advanced to %s", branch_name, commit_hash)

def validate_branch_name(branch_name: str) -> None:
    if not branch_name or BRANCH_NAME_SEPARATOR in branch_name:
        raise UserInputError(f"invalid branch name '{branch_name}'")

def create_branch(state: RepoState, branch_name: str, start_commit: Digest, copy_from: str) -> BranchInfo:
    validate_branch_name(branch_name)
    if branch_name in state.branches:
        raise PreconditionError("A branch with that name already exists.")
    source = get_branch(state, copy_from)
    branch = BranchInfo(head=start_commit, history=list(source.history))
    _append_history(branch, [start_commit])
    state.branches[branch_name] = branch
    logger.info("created branch %s at %s", branch_name, start_commit)
    return branch

def delete_branch(state: RepoState, branch_name: str) -> None:
    if branch_name not in state.branches:
        raise NotFoundError("A branch with that name does not exist.")
    if state.activeBranch == branch_name:
        raise PreconditionError("Cannot remove the current branch.")
    state.branches.pop(branch_name)
    logger.info("deleted branch %s", branch_name)

def merge_branch_history(state: RepoState, branch_name: str, other_history: list[Digest]) -> None:
    _append_history(get_branch(state, branch_name), other_history)

def move_branch_head(root: Path, state: RepoState, branch_name: str, commit_hash: Digest) -> None:
    branch = get_branch(state, branch_name)
    branch.head = commit_hash
    # a moved head may abandon commits, so rebuild history from the graph
    branch.history = list(reversed(reachable_from(root, commit_hash)))
    logger.info("branch %s reset to %s", branch_name, commit_hash)

def switch_branch(state: RepoState, branch_name: str) -> None:
    get_branch(state, branch_name)
    state.activeBranch = branch_name
