import pytest

from sprig.errors import PreconditionError
from sprig.models import StagingInfo
from sprig.staging_helpers import (
    apply_staging,
    classify,
    clear_staging,
    has_pending_changes,
    mark_removed,
    stage,
    unstage,
)

OLD = "1" * 40
NEW = "2" * 40
OTHER = "3" * 40


def test_stage_records_new_content():
    staging = StagingInfo()
    stage(staging, "a.txt", NEW, {"a.txt": OLD})
    assert staging.staged == {"a.txt": NEW}


def test_staging_unchanged_content_is_not_a_change():
    staging = StagingInfo()
    stage(staging, "a.txt", NEW, {"a.txt": OLD})
    stage(staging, "a.txt", OLD, {"a.txt": OLD})
    assert staging.staged == {}
    assert not has_pending_changes(staging)


def test_stage_clears_pending_removal():
    staging = StagingInfo(removed=["a.txt"])
    stage(staging, "a.txt", OLD, {"a.txt": OLD})
    assert staging.removed == []
    assert staging.staged == {}


def test_unstage():
    staging = StagingInfo(staged={"a.txt": NEW})
    unstage(staging, "a.txt")
    unstage(staging, "missing.txt")
    assert staging.staged == {}


def test_mark_removed_tracked_file():
    staging = StagingInfo(staged={"a.txt": NEW})
    assert mark_removed(staging, "a.txt", {"a.txt": OLD}) is True
    assert staging.staged == {}
    assert staging.removed == ["a.txt"]


def test_mark_removed_only_staged_file_just_unstages():
    staging = StagingInfo(staged={"new.txt": NEW})
    assert mark_removed(staging, "new.txt", {}) is False
    assert staging.staged == {}
    assert staging.removed == []


def test_mark_removed_without_reason_fails():
    staging = StagingInfo()
    with pytest.raises(PreconditionError, match="No reason to remove the file."):
        mark_removed(staging, "a.txt", {})
    assert staging == StagingInfo()


def test_apply_staging():
    staging = StagingInfo(staged={"b.txt": NEW, "c.txt": OTHER}, removed=["a.txt"])
    files = apply_staging({"a.txt": OLD, "b.txt": OLD, "d.txt": OLD}, staging)
    assert files == {"b.txt": NEW, "c.txt": OTHER, "d.txt": OLD}


def test_clear_staging():
    staging = StagingInfo(staged={"b.txt": NEW}, removed=["a.txt"])
    clear_staging(staging)
    assert staging == StagingInfo()


def test_classify_all_states():
    head_files = {"same.txt": OLD, "edited.txt": OLD, "gone.txt": OLD, "removed.txt": OLD, "staged.txt": OLD}
    staging = StagingInfo(
        staged={"staged.txt": NEW, "new.txt": NEW, "vanished.txt": NEW},
        removed=["removed.txt"],
    )
    working_files = {
        "same.txt": OLD,
        "edited.txt": NEW,
        "staged.txt": OTHER,
        "new.txt": NEW,
        "stray.txt": OTHER,
        "removed.txt": OLD,
    }

    report = classify(staging, head_files, working_files)

    assert report.tracked == ["edited.txt", "gone.txt", "same.txt", "staged.txt"]
    assert report.staged == ["new.txt", "staged.txt", "vanished.txt"]
    assert report.removed == ["removed.txt"]
    assert report.modified == {
        "edited.txt": "modified",
        "gone.txt": "deleted",
        "staged.txt": "modified",
        "vanished.txt": "deleted",
    }
    assert report.untracked == ["removed.txt", "stray.txt"]
