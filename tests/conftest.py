from pathlib import Path
from typing import Callable

import pytest

from sprig import commands
from sprig.repo_utils import Repository


@pytest.fixture
def repo(tmp_path: Path) -> Repository:
    """A freshly initialized repository in an empty temporary directory."""
    return commands.init(tmp_path)


@pytest.fixture
def write(repo: Repository) -> Callable[[str, str], Path]:
    def _write(path: str, text: str) -> Path:
        filepath = repo.root / path
        filepath.parent.mkdir(parents=True, exist_ok=True)
        filepath.write_text(text)
        return filepath
    return _write


@pytest.fixture
def commit_files(repo: Repository, write) -> Callable[..., str]:
    """Write ``files`` (path -> text), stage them and commit with ``message``."""
    def _commit_files(message: str, **files: str) -> str:
        for path, text in files.items():
            write(path, text)
        commands.add(repo, list(files))
        return commands.commit(repo, message)
    return _commit_files
