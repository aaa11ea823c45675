import hashlib
import json
from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, TypeAlias

Digest: TypeAlias = str
FileMap: TypeAlias = dict[str, Digest]

class CommitInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    commitMessage: str
    timestamp: int
    parentCommits: list[str] = Field(default_factory=list, max_length=2)
    files: dict[str, str] = Field(default_factory=dict)

    def serialize(self) -> bytes:
        # canonical form: the id depends on field values only, never on dict order
        return json.dumps(self.model_dump(), sort_keys=True, separators=(",", ":")).encode()

    @property
    def id(self) -> Digest:
        return hashlib.sha1(self.serialize()).hexdigest()

class BranchInfo(BaseModel):
    head: str
    history: list[str] = Field(default_factory=list)

class StagingInfo(BaseModel):
    staged: dict[str, str] = Field(default_factory=dict)
    removed: list[str] = Field(default_factory=list)

class RepoState(BaseModel):
    activeBranch: str
    branches: dict[str, BranchInfo] = Field(default_factory=dict)
    staging: StagingInfo = Field(default_factory=StagingInfo)

class StatusReport(BaseModel):
    activeBranch: str = ""
    branches: list[str] = Field(default_factory=list)
    staged: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)
    tracked: list[str] = Field(default_factory=list)
    modified: dict[str, Literal["modified", "deleted"]] = Field(default_factory=dict)
    untracked: list[str] = Field(default_factory=list)

class LogEntry(BaseModel):
    commitHash: str
    commitMessage: str
    timestamp: int
    parentCommits: list[str]

class MergeResult(BaseModel):
    outcome: Literal["up-to-date", "fast-forward", "merged"]
    commitHash: str
    conflicts: list[str] = Field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)
