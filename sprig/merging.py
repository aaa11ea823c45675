from dataclasses import dataclass, field
from pathlib import Path
import logging
from .errors import NotFoundError, PreconditionError
from .branching import add_commit, merge_branch_history
from .models import FileMap, MergeResult, RepoState
from .commit_helpers import (
    get_commit_info,
    make_commit,
    update_commit_info,
)
from .graph_utils import find_split_point
from .staging_helpers import (
    apply_staging,
    classify,
    clear_staging,
    has_pending_changes,
    mark_removed,
    stage,
)
from .file_helpers import (
    delete_working_file,
    list_working_files,
    read_blob,
    write_blob,
)
from .recreatedirectory import (
    checkout_blob,
    recreate_directory,
    untracked_in_the_way,
    write_conflict_file,
)

logger = logging.getLogger(__name__)

UNTRACKED_IN_THE_WAY = "There is an untracked file in the way; delete it, or add and commit it first."

@dataclass
class MergePlan:
    take: FileMap = field(default_factory=dict)     # path -> given blob to check out and stage
    remove: list[str] = field(default_factory=list)
    conflicts: list[str] = field(default_factory=list)

    @property
    def written_paths(self) -> list[str]:
        return list(self.take) + self.conflicts

def plan_merge(split_files: FileMap, current_files: FileMap, given_files: FileMap) -> MergePlan:
    """Classify every path of the three snapshots into exactly one merge action.

    Paths that need no action (same on both sides, or changed only on the
    current side) do not appear in the plan.
    """
    plan = MergePlan()
    for path in sorted(set(split_files) | set(current_files) | set(given_files)):
        base = split_files.get(path)
        ours = current_files.get(path)
        theirs = given_files.get(path)
        if ours == theirs or theirs == base:
            continue
        if ours == base:
            if theirs is None:
                plan.remove.append(path)
            else:
                plan.take[path] = theirs
        else:
            plan.conflicts.append(path)
    return plan

def merge_commits(root: Path, state: RepoState, given_name: str) -> MergeResult:
    if given_name not in state.branches:
        raise NotFoundError("A branch with that name does not exist.")
    if has_pending_changes(state.staging):
        raise PreconditionError("You have uncommitted changes.")
    current_name = state.activeBranch
    if given_name == current_name:
        raise PreconditionError("Cannot merge a branch with itself.")

    current = state.branches[current_name]
    given = state.branches[given_name]
    split_hash = find_split_point(root, current, given)
    current_info = get_commit_info(root, current.head)
    given_info = get_commit_info(root, given.head)
    untracked = classify(state.staging, current_info.files, list_working_files(root)).untracked

    if split_hash == given.head:
        logger.info("%s is already contained in %s", given_name, current_name)
        return MergeResult(outcome="up-to-date", commitHash=current.head)

    if split_hash == current.head:
        if untracked_in_the_way(untracked, given_info.files):
            raise PreconditionError(UNTRACKED_IN_THE_WAY)
        recreate_directory(root, current_info.files, given_info.files)
        current.head = given.head
        merge_branch_history(state, current_name, given.history)
        logger.info("fast-forwarded %s to %s", current_name, given.head)
        return MergeResult(outcome="fast-forward", commitHash=given.head)

    split_info = get_commit_info(root, split_hash)
    plan = plan_merge(split_info.files, current_info.files, given_info.files)
    if untracked_in_the_way(untracked, plan.written_paths):
        raise PreconditionError(UNTRACKED_IN_THE_WAY)

    for path in plan.remove:
        mark_removed(state.staging, path, current_info.files)
        delete_working_file(root, path)
    for path, blob_hash in plan.take.items():
        checkout_blob(root, path, blob_hash)
        stage(state.staging, path, blob_hash, current_info.files)
    for path in plan.conflicts:
        ours = current_info.files.get(path)
        theirs = given_info.files.get(path)
        content = write_conflict_file(
            root,
            path,
            read_blob(root, ours) if ours else None,
            read_blob(root, theirs) if theirs else None,
        )
        stage(state.staging, path, write_blob(root, content), current_info.files)
    if plan.conflicts:
        logger.warning("merge of %s into %s has conflicts in %s", given_name, current_name, ", ".join(plan.conflicts))

    merge_commit_info = make_commit(
        f"Merged {given_name} into {current_name}.",
        apply_staging(current_info.files, state.staging),
        [current.head, given.head],
    )
    merge_commit_hash = update_commit_info(root, merge_commit_info)
    merge_branch_history(state, current_name, given.history)
    add_commit(state, current_name, merge_commit_hash)
    clear_staging(state.staging)
    return MergeResult(outcome="merged", commitHash=merge_commit_hash, conflicts=plan.conflicts)
