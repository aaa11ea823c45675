from sprig import commands
from sprig.branching import create_branch
from sprig.commit_helpers import make_commit, root_commit, update_commit_info
from sprig.graph_utils import (
    ancestor_depths,
    find_split_point,
    first_parent_log,
    is_ancestor,
    reachable_from,
)
from sprig.models import BranchInfo


def _store(repo, message, parents, timestamp=1):
    return update_commit_info(repo.root, make_commit(message, {}, parents, timestamp=timestamp))


def _split(repo, a, b):
    return find_split_point(repo.root, repo.state.branches[a], repo.state.branches[b])


def test_split_point_right_after_branching(repo, commit_files):
    branch_point = commit_files("A", file1="x")
    commands.create_branch(repo, "feature")

    assert _split(repo, "master", "feature") == branch_point
    assert _split(repo, "feature", "master") == branch_point


def test_split_point_of_diverged_branches(repo, commit_files):
    branch_point = commit_files("A", file1="x")
    commands.create_branch(repo, "feature")
    commit_files("C", file1="z")
    commands.checkout_branch(repo, "feature")
    commit_files("B", file1="y")

    assert _split(repo, "master", "feature") == branch_point
    assert _split(repo, "feature", "master") == branch_point


def test_split_point_when_one_branch_is_ahead(repo, commit_files):
    branch_point = commit_files("A", file1="x")
    commands.create_branch(repo, "feature")
    commands.checkout_branch(repo, "feature")
    commit_files("B", file1="y")

    assert _split(repo, "master", "feature") == branch_point
    assert _split(repo, "feature", "master") == branch_point


def test_split_point_after_merge_of_a_merge(repo, commit_files):
    commit_files("A", file1="x", file2="x")
    commands.create_branch(repo, "feature")
    commit_files("C", file1="z")
    commands.checkout_branch(repo, "feature")
    first_feature = commit_files("B", file2="y")
    commands.checkout_branch(repo, "master")
    merged = commands.merge(repo, "feature")
    assert merged.outcome == "merged"

    # the merge brought feature's tip into master's ancestry
    assert is_ancestor(first_feature, repo.state.branches["master"].history)
    assert set(repo.state.branches["master"].history) == set(reachable_from(repo.root, merged.commitHash))

    commit_files("D", file1="w")
    commands.checkout_branch(repo, "feature")
    commit_files("E", file2="v")

    assert _split(repo, "master", "feature") == first_feature
    assert _split(repo, "feature", "master") == first_feature


def test_split_point_drops_candidate_that_is_an_ancestor_of_the_other(repo):
    initial = root_commit().id
    shared = _store(repo, "shared", [initial])
    other_tip = _store(repo, "other", [shared])
    side_1 = _store(repo, "side 1", [shared])
    side_2 = _store(repo, "side 2", [side_1])
    # a merge that reaches back to the root directly
    tip = _store(repo, "tip", [side_2, initial])
    branch_a = BranchInfo(head=tip, history=[initial, shared, side_1, side_2, tip])
    branch_b = BranchInfo(head=other_tip, history=[initial, shared, other_tip])

    # walking from A meets the root first, yet "shared" is lower
    assert find_split_point(repo.root, branch_a, branch_b) == shared


def test_ancestor_depths_follow_both_parents(repo):
    initial = root_commit().id
    left = _store(repo, "left", [initial])
    right = _store(repo, "right", [initial])
    merge = _store(repo, "merge", [left, right])

    depths = ancestor_depths(repo.root, merge)

    assert depths == {merge: 0, left: 1, right: 1, initial: 2}


def test_first_parent_log_ignores_second_parents(repo):
    initial = root_commit().id
    left = _store(repo, "left", [initial])
    right = _store(repo, "right", [initial])
    merge = _store(repo, "merge", [left, right])

    assert [h for h, _ in first_parent_log(repo.root, merge)] == [merge, left, initial]


def test_created_branch_copies_history(repo, commit_files):
    head = commit_files("A", file1="x")
    branch = create_branch(repo.state.model_copy(deep=True), "topic", head, "master")

    assert branch.head == head
    assert branch.history == [root_commit().id, head]
