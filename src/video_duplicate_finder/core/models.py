"""Pydantic models for video duplicate finder."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_EXTENSIONS = ["mp4", "mkv", "wmv", "flv", "m4v", "ts", "mpg", "avi", "mov", "webm"]


class PatternMatch(BaseModel):
    """Identifier substring found in a filename by a user pattern."""

    identifier: str = Field(..., description="Matched substring")
    start: int = Field(..., ge=0, description="Start offset in the filename")
    end: int = Field(..., ge=0, description="End offset in the filename")


class FileInfo(BaseModel):
    """Represents a candidate video file."""

    path: Path = Field(..., description="Full path to the file")
    filename: str = Field(..., description="File name with extension")
    stem: str = Field(..., description="File name without extension")
    extension: str = Field(..., description="Lowercase extension without the leading dot")
    pattern_match: tuple[int, int] | None = Field(
        None, description="Offsets of the matched identifier within the filename"
    )

    @field_validator("extension")
    @classmethod
    def validate_extension(cls, v: str) -> str:
        """Strip a leading dot and lowercase the extension."""
        return v.lstrip(".").lower()

    @classmethod
    def from_path(cls, path: Path) -> "FileInfo":
        """
        Create file info from a path.

        Args:
            path: Path to the file

        Returns:
            FileInfo with filename, stem and extension derived from the path
        """
        return cls(
            path=path,
            filename=path.name,
            stem=path.stem,
            extension=path.suffix,
        )

    @property
    def matched_text(self) -> str | None:
        """The identifier substring matched by a pattern, if any."""
        if self.pattern_match is None:
            return None
        start, end = self.pattern_match
        return self.filename[start:end]

    def __str__(self) -> str:
        return str(self.path)


class DuplicateGroup(BaseModel):
    """Represents a group of likely duplicate files."""

    key: str = Field(..., description="Group key: a normalized stem or a pattern identifier")
    files: list[FileInfo] = Field(default_factory=list, description="Files in this group")

    @property
    def file_count(self) -> int:
        """Number of files in this group."""
        return len(self.files)

    @property
    def display_name(self) -> str:
        """Name used for the group's directory when moving duplicates."""
        if self.files and self.files[0].matched_text:
            return self.files[0].matched_text
        return self.key

    def __str__(self) -> str:
        return f"Duplicate group '{self.key}' ({self.file_count} files)"


class ApplicationConfig(BaseModel):
    """Configuration settings for the application."""

    paths: list[Path] = Field(default_factory=list, description="Root directories to scan")
    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        description="File extensions to consider as video files",
    )
    patterns: list[str] = Field(
        default_factory=list, description="Identifier regex patterns in priority order"
    )
    recurse: bool = Field(default=False, description="Scan subdirectories recursively")
    print_only: bool = Field(
        default=False, description="Print the groups instead of resolving them interactively"
    )
    move_files: bool = Field(
        default=False, description="Move duplicates into a Duplicates directory in print mode"
    )
    dryrun: bool = Field(default=False, description="Show changes without touching any file")
    verbose: bool = Field(default=False, description="Print verbose output")
    log_level: str = Field(default="WARNING", description="Logging level")
    max_workers: int | None = Field(
        default=None, gt=0, description="Worker threads for file analysis, defaults to CPU count"
    )

    @field_validator("extensions")
    @classmethod
    def validate_extensions(cls, v: list[str]) -> list[str]:
        """Strip leading dots, lowercase and de-duplicate extensions."""
        extensions: list[str] = []
        for ext in v:
            normalized = ext.strip().lstrip(".").lower()
            if normalized and normalized not in extensions:
                extensions.append(normalized)
        return extensions or list(DEFAULT_EXTENSIONS)

    @field_validator("patterns")
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        """De-duplicate patterns while keeping their priority order."""
        return list(dict.fromkeys(v))
