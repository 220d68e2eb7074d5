"""Data models shared by drivers and the conformance suite."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FileInfo(BaseModel):
    """
    Metadata snapshot for a path, as returned by ``stat``.

    Directories report size 0 and may omit a meaningful modification time.
    Never cached: every stat call produces a fresh instance.
    """
    model_config = ConfigDict(frozen=True)

    path: str
    size: int = Field(default=0, ge=0)
    is_dir: bool = False
    mod_time: Optional[datetime] = None

    @model_validator(mode="after")
    def validate_directory_size(self):
        """Directories have no content of their own."""
        if self.is_dir and self.size != 0:
            raise ValueError(f"directory {self.path} must report size 0, got {self.size}")
        return self
