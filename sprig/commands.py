"""Repository operations; each returns structured data and never prints."""
from pathlib import Path
import logging
from .errors import NotFoundError, PreconditionError, UserInputError
from .constants import DEFAULT_BRANCH
from .repo_utils import (
    Repository,
    get_branch,
    get_sprig_dir,
    save_state,
    transaction,
)
from .file_helpers import (
    delete_working_file,
    get_blobs_dir,
    list_working_files,
    read_blob,
    read_working_file,
    to_repo_path,
    write_blob,
    write_working_file,
)
from .staging_helpers import (
    apply_staging,
    classify,
    clear_staging,
    has_pending_changes,
    mark_removed,
    stage,
)
from .commit_helpers import (
    current_commit_hash,
    current_commit_info,
    get_commit_info,
    get_commits_dir,
    list_commit_hashes,
    make_commit,
    resolve_commit_hash,
    root_commit,
    update_commit_info,
)
from .branching import (
    add_commit,
    create_branch as create_branch_pointer,
    delete_branch,
    move_branch_head,
    switch_branch,
)
from .graph_utils import first_parent_log
from .merging import UNTRACKED_IN_THE_WAY, merge_commits
from .recreatedirectory import recreate_directory, untracked_in_the_way
from .models import BranchInfo, CommitInfo, Digest, LogEntry, MergeResult, RepoState, StatusReport

logger = logging.getLogger(__name__)

def init(root: Path | None = None) -> Repository:
    root = (root or Path.cwd()).resolve()
    if get_sprig_dir(root).exists():
        raise UserInputError("A Sprig version-control system already exists in the current directory.")
    get_sprig_dir(root).mkdir()
    get_commits_dir(root).mkdir()
    get_blobs_dir(root).mkdir()
    initial_hash = update_commit_info(root, root_commit())
    state = RepoState(
        activeBranch=DEFAULT_BRANCH,
        branches={DEFAULT_BRANCH: BranchInfo(head=initial_hash, history=[initial_hash])},
    )
    save_state(root, state)
    logger.info("initialized empty sprig repository in %s", get_sprig_dir(root))
    return Repository(root=root, state=state)

def _untracked(repo: Repository, state: RepoState) -> list[str]:
    head_files = get_commit_info(repo.root, get_branch(state, state.activeBranch).head).files
    return classify(state.staging, head_files, list_working_files(repo.root)).untracked

def add(repo: Repository, paths: list[Path | str]) -> list[str]:
    if not paths:
        raise UserInputError("Incorrect operands.")
    repo_paths = [to_repo_path(repo.root, path) for path in paths]
    # read everything first so a missing file aborts before anything is staged
    contents = {repo_path: read_working_file(repo.root, repo_path) for repo_path in repo_paths}
    head_files = current_commit_info(repo).files
    with transaction(repo) as state:
        for repo_path, content in contents.items():
            stage(state.staging, repo_path, write_blob(repo.root, content), head_files)
    return repo_paths

def commit(repo: Repository, message: str) -> Digest:
    if not message:
        raise UserInputError("Please enter a commit message.")
    if not has_pending_changes(repo.state.staging):
        raise PreconditionError("No changes added to the commit.")
    parent_hash = current_commit_hash(repo)
    parent_info = get_commit_info(repo.root, parent_hash)
    with transaction(repo) as state:
        new_commit = make_commit(message, apply_staging(parent_info.files, state.staging), [parent_hash])
        new_commit_hash = update_commit_info(repo.root, new_commit)
        add_commit(state, state.activeBranch, new_commit_hash)
        clear_staging(state.staging)
    logger.info("committed %s on %s", new_commit_hash, repo.state.activeBranch)
    return new_commit_hash

def remove(repo: Repository, path: Path | str) -> None:
    repo_path = to_repo_path(repo.root, path)
    head_files = current_commit_info(repo).files
    with transaction(repo) as state:
        tracked = mark_removed(state.staging, repo_path, head_files)
    if tracked:
        delete_working_file(repo.root, repo_path)

def checkout_commit_file(repo: Repository, commit_hash: str, path: Path | str) -> None:
    """Overwrite the working copy of ``path`` with its version in a commit. Nothing is staged."""
    repo_path = to_repo_path(repo.root, path)
    commit_info = get_commit_info(repo.root, commit_hash)
    if repo_path not in commit_info.files:
        raise NotFoundError("File does not exist in that commit.")
    write_working_file(repo.root, repo_path, read_blob(repo.root, commit_info.files[repo_path]))

def checkout_file(repo: Repository, path: Path | str) -> None:
    checkout_commit_file(repo, current_commit_hash(repo), path)

def checkout_branch(repo: Repository, branch_name: str) -> None:
    target = get_branch(repo.state, branch_name)
    if branch_name == repo.state.activeBranch:
        raise PreconditionError("No need to checkout the current branch.")
    if has_pending_changes(repo.state.staging):
        raise PreconditionError("You have uncommitted changes.")
    target_files = get_commit_info(repo.root, target.head).files
    if untracked_in_the_way(_untracked(repo, repo.state), target_files):
        raise PreconditionError(UNTRACKED_IN_THE_WAY)
    current_files = current_commit_info(repo).files
    with transaction(repo) as state:
        recreate_directory(repo.root, current_files, target_files)
        switch_branch(state, branch_name)
        clear_staging(state.staging)
    logger.info("switched to branch %s", branch_name)

def checkout(repo: Repository, target: str, path: Path | str | None = None) -> None:
    """Dispatch between the three checkout forms: branch, head file, commit file."""
    if path is None:
        checkout_branch(repo, target)
    elif target:
        checkout_commit_file(repo, target, path)
    else:
        checkout_file(repo, path)

def create_branch(repo: Repository, branch_name: str) -> Digest:
    with transaction(repo) as state:
        branch = create_branch_pointer(state, branch_name, current_commit_hash(repo), state.activeBranch)
    return branch.head

def remove_branch(repo: Repository, branch_name: str) -> None:
    with transaction(repo) as state:
        delete_branch(state, branch_name)

def reset(repo: Repository, commit_hash: str) -> Digest:
    full_hash = resolve_commit_hash(repo.root, commit_hash)
    target_files = get_commit_info(repo.root, full_hash).files
    if untracked_in_the_way(_untracked(repo, repo.state), target_files):
        raise PreconditionError(UNTRACKED_IN_THE_WAY)
    current_files = current_commit_info(repo).files
    with transaction(repo) as state:
        recreate_directory(repo.root, current_files, target_files)
        move_branch_head(repo.root, state, state.activeBranch, full_hash)
        clear_staging(state.staging)
    return full_hash

def merge(repo: Repository, branch_name: str) -> MergeResult:
    with transaction(repo) as state:
        result = merge_commits(repo.root, state, branch_name)
    return result

def _log_entry(commit_hash: Digest, commit_info: CommitInfo) -> LogEntry:
    return LogEntry(
        commitHash=commit_hash,
        commitMessage=commit_info.commitMessage,
        timestamp=commit_info.timestamp,
        parentCommits=commit_info.parentCommits,
    )

def log(repo: Repository) -> list[LogEntry]:
    return [_log_entry(h, info) for h, info in first_parent_log(repo.root, current_commit_hash(repo))]

def global_log(repo: Repository) -> list[LogEntry]:
    entries = [_log_entry(h, get_commit_info(repo.root, h)) for h in list_commit_hashes(repo.root)]
    entries.sort(key=lambda entry: (entry.timestamp, entry.commitHash), reverse=True)
    return entries

def find(repo: Repository, message: str) -> list[Digest]:
    matches = [
        commit_hash for commit_hash in list_commit_hashes(repo.root)
        if get_commit_info(repo.root, commit_hash).commitMessage == message
    ]
    if not matches:
        raise NotFoundError("Found no commit with that message.")
    return matches

def status(repo: Repository) -> StatusReport:
    report = classify(repo.state.staging, current_commit_info(repo).files, list_working_files(repo.root))
    report.activeBranch = repo.state.activeBranch
    report.branches = sorted(repo.state.branches)
    return report
