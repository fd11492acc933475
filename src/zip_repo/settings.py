from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from zip_repo.config import RULES_FILE_NAME


class Settings(BaseModel):
    """Configuration settings for one zip_repo run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    source: Path = Field(..., description="Directory to archive.")
    destination: Path | None = Field(
        default=None,
        description="Output zip path; defaults to <source folder name>.zip.",
    )
    ignore: str = Field(
        default="",
        description="Extra ignore patterns, comma separated.",
    )
    rules_file_name: str = Field(
        default=RULES_FILE_NAME,
        description="Name of the rules file looked up inside the source directory.",
    )
    show_progress: bool = Field(default=True, description="Display a progress bar.")
