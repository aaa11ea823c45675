from pathlib import Path
from collections import deque
import logging

from .errors import NotFoundError
from .models import BranchInfo, CommitInfo, Digest
from .commit_helpers import get_commit_info

logger = logging.getLogger(__name__)

def is_ancestor(commit_hash: Digest, history: set[Digest] | list[Digest]) -> bool:
    return commit_hash in history

def ancestor_depths(root: Path, head: Digest) -> dict[Digest, int]:
    """Breadth-first distances from ``head`` to every commit reachable through any parent.

    Dict order is visiting order, so equal depths keep a stable, parent-first order.
    """
    depths = {head: 0}
    queue = deque([head])
    while queue:
        commit_hash = queue.popleft()
        for parent_hash in get_commit_info(root, commit_hash).parentCommits:
            if parent_hash not in depths:
                depths[parent_hash] = depths[commit_hash] + 1
                queue.append(parent_hash)
    return depths

def reachable_from(root: Path, head: Digest) -> list[Digest]:
    return list(ancestor_depths(root, head))

def nearest_member(root: Path, head: Digest, history: set[Digest]) -> tuple[Digest, int] | None:
    """Walk back from ``head`` and return the first commit found in ``history`` with its depth."""
    seen = {head}
    queue = deque([(head, 0)])
    while queue:
        commit_hash, depth = queue.popleft()
        if commit_hash in history:
            return commit_hash, depth
        for parent_hash in get_commit_info(root, commit_hash).parentCommits:
            if parent_hash not in seen:
                seen.add(parent_hash)
                queue.append((parent_hash, depth + 1))
    return None

def find_split_point(root: Path, branch_a: BranchInfo, branch_b: BranchInfo) -> Digest:
    """Return the latest common ancestor of two branch heads.

    Both heads are walked back through every parent: A's head against B's
    history and B's head against A's history. A candidate that is itself an
    ancestor of the other candidate is not lowest and is dropped. Of what
    remains, the one nearest A's head wins, and A's own candidate wins ties.
    """
    history_a = set(branch_a.history) | {branch_a.head}
    history_b = set(branch_b.history) | {branch_b.head}
    found_a = nearest_member(root, branch_a.head, history_b)
    found_b = nearest_member(root, branch_b.head, history_a)
    if found_a is None or found_b is None:
        raise NotFoundError("no common ancestor found")

    candidates = [found_a[0]]
    if found_b[0] != found_a[0]:
        candidates.append(found_b[0])
    if len(candidates) == 1:
        logger.debug("split point of %s and %s is %s", branch_a.head, branch_b.head, candidates[0])
        return candidates[0]

    ancestry = {candidate: ancestor_depths(root, candidate) for candidate in candidates}
    lowest = [
        candidate for candidate in candidates
        if not any(candidate in ancestry[other] for other in candidates if other != candidate)
    ]
    depths_a = ancestor_depths(root, branch_a.head)
    # min() keeps the first of equal keys, and candidate A comes first
    split = min(lowest, key=lambda candidate: depths_a.get(candidate, len(depths_a)))
    logger.debug("split point of %s and %s is %s (candidates %s)", branch_a.head, branch_b.head, split, candidates)
    return split

def first_parent_log(root: Path, head: Digest) -> list[tuple[Digest, CommitInfo]]:
    entries = []
    commit_hash = head
    while commit_hash:
        commit_info = get_commit_info(root, commit_hash)
        entries.append((commit_hash, commit_info))
        commit_hash = commit_info.parentCommits[0] if commit_info.parentCommits else None
    return entries
