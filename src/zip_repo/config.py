from __future__ import annotations

from enum import StrEnum, auto
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, computed_field

RULES_FILE_NAME = ".zipignore"
ARCHIVE_EXTENSION = ".zip"
COPY_CHUNK_SIZE = 1024 * 1024

_ = Path()


class OutcomeStatus(StrEnum):
    """Result of archiving one file."""

    OK = auto()
    FAILED = auto()


class FailureStage(StrEnum):
    """Step of the per-file archiving sequence at which a failure happened.

    OPEN is opening the source file, ENTRY is creating the zip entry and WRITE
    is streaming the bytes into it.
    """

    OPEN = auto()
    ENTRY = auto()
    WRITE = auto()


class RunState(StrEnum):
    """States of a single archiving run, in the order they are reached."""

    START = auto()
    RULES_COMPILED = auto()
    FILES_COLLECTED = auto()
    ARCHIVE_WRITTEN = auto()
    DONE = auto()
    FAILED = auto()


class FileOutcome(BaseModel):
    """Outcome of writing one collected file into the archive.

    Attributes:
        path: Path relative to the source root, with POSIX separators.
        status: Whether the entry was fully written.
        stage: Failing step, only set for failures.
        error: Underlying error message, only set for failures.
        size: Number of bytes copied into the entry.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="File path relative to the source root")
    status: OutcomeStatus = Field(..., description="ok or failed")
    stage: FailureStage | None = Field(default=None, description="Failing step")
    error: str = Field(default="", description="Error message for failures")
    size: int = Field(default=0, ge=0, description="Bytes written")

    @computed_field
    @property
    def ok(self) -> bool:
        """True when the entry was written completely."""
        return self.status is OutcomeStatus.OK


class ArchiveReport(BaseModel):
    """Per-file outcomes of an archive run, in archive order."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    destination: Path = Field(..., description="Archive file path")
    outcomes: list[FileOutcome] = Field(default_factory=list)

    @computed_field
    @property
    def total(self) -> int:
        return len(self.outcomes)

    @computed_field
    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @computed_field
    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def failures(self) -> list[FileOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def written_paths(self) -> list[str]:
        return [o.path for o in self.outcomes if o.ok]


class RunResult(BaseModel):
    """Final state of an orchestrated run, returned instead of printed."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    state: RunState = Field(default=RunState.START)
    destination: Path | None = Field(default=None)
    report: ArchiveReport | None = Field(default=None)
    error: str = Field(default="", description="Fatal error message, if any")

    @property
    def ok(self) -> bool:
        return self.state is RunState.DONE
