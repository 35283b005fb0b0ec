"""File scanning module for discovering video files."""

import logging
import os
import time
from collections.abc import Generator
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path
from typing import Protocol

from .models import ApplicationConfig, FileInfo

logger = logging.getLogger(__name__)

SYSTEM_DIRECTORIES = {
    "$recycle.bin",
    "system volume information",
    "@eadir",
    "#recycle",
    "lost+found",
}


class ProgressCallback(Protocol):
    """Protocol for progress callback functions."""

    def __call__(self, current: int, total: int | None = None, message: str = "") -> None:
        """Called to report progress during scanning."""
        ...


def should_skip_directory(name: str) -> bool:
    """Check if a directory is hidden or a known system directory."""
    return name.startswith(".") or name.lower() in SYSTEM_DIRECTORIES


class VideoFileScanner:
    """Scans root directories for video files."""

    def __init__(self, config: ApplicationConfig | None = None):
        """
        Initialize the scanner with configuration.

        Args:
            config: Application configuration, defaults to ApplicationConfig()
        """
        self.config = config or ApplicationConfig()

    def is_video_file(self, file_path: Path) -> bool:
        """
        Check if a file has one of the configured video extensions.

        Args:
            file_path: Path to the file to check

        Returns:
            True if the extension is allowed, False otherwise
        """
        extension = file_path.suffix.lstrip(".").lower()
        return extension in self.config.extensions

    def discover_files(
        self,
        directory: Path,
        recursive: bool = False,
        progress_callback: ProgressCallback | None = None,
    ) -> Generator[Path, None, None]:
        """
        Discover regular files in a directory, optionally recursively.

        Hidden and system directories are not entered. Entries that cannot be
        read are logged and skipped.

        Args:
            directory: Directory to scan
            recursive: Whether to scan subdirectories recursively
            progress_callback: Optional callback for progress updates

        Yields:
            Path objects for discovered files

        Raises:
            OSError: If the root directory does not exist or is not a directory
        """
        if not directory.exists():
            raise OSError(f"Directory does not exist: {directory}")

        if not directory.is_dir():
            raise OSError(f"Path is not a directory: {directory}")

        logger.info(f"Starting file discovery in: {directory}")
        files_found = 0

        def on_error(error: OSError) -> None:
            logger.warning(f"Skipping unreadable entry {error.filename}: {error.strerror}")

        for dirpath, dirnames, filenames in os.walk(directory, onerror=on_error):
            # Prune in place so os.walk does not descend
            if recursive:
                dirnames[:] = sorted(d for d in dirnames if not should_skip_directory(d))
            else:
                dirnames[:] = []

            for name in sorted(filenames):
                file_path = Path(dirpath) / name
                try:
                    if not file_path.is_file():
                        continue
                except OSError as e:
                    logger.warning(f"Skipping unreadable entry {file_path}: {e}")
                    continue

                files_found += 1
                if progress_callback:
                    progress_callback(files_found, None, f"Discovered {files_found} files...")
                yield file_path

        logger.info(f"File discovery complete. Found {files_found} total files in {directory}.")

    def scan_directory(
        self,
        directory: Path,
        recursive: bool | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> list[FileInfo]:
        """
        Scan a directory for video files.

        Args:
            directory: Directory to scan
            recursive: Whether to scan recursively, defaults to the configured value
            progress_callback: Optional callback for progress updates

        Returns:
            List of FileInfo objects for files with an allowed extension
        """
        if recursive is None:
            recursive = self.config.recurse

        return [
            FileInfo.from_path(file_path)
            for file_path in self.discover_files(directory, recursive, progress_callback)
            if self.is_video_file(file_path)
        ]

    def scan_roots(
        self,
        roots: list[Path],
        progress_callback: ProgressCallback | None = None,
    ) -> list[FileInfo]:
        """
        Scan several root directories in parallel.

        Roots may overlap, for example a directory and one of its
        subdirectories. A file reached through more than one root is
        returned once.

        Args:
            roots: Root directories to scan
            progress_callback: Optional callback for discovery progress

        Returns:
            Video files from all roots, in root order, unique by resolved path
        """
        start_time = time.time()
        if not roots:
            return []

        scan = partial(self.scan_directory, recursive=None, progress_callback=progress_callback)
        with ThreadPoolExecutor(max_workers=min(len(roots), os.cpu_count() or 1)) as executor:
            results = list(executor.map(scan, roots))

        files = []
        seen: set[Path] = set()
        for file in (file for root_files in results for file in root_files):
            resolved = file.path.resolve()
            if resolved in seen:
                logger.debug(f"Skipping {file.path}, already found through another root")
                continue
            seen.add(resolved)
            files.append(file)

        scan_duration = time.time() - start_time
        logger.info(
            f"Scan complete: {len(files)} video files found in {len(roots)} root(s) "
            f"in {scan_duration:.2f} seconds"
        )
        return files
