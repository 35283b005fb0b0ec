"""Duplicate grouping module for organizing likely duplicates."""

import logging
import os
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor

from .models import ApplicationConfig, DuplicateGroup, FileInfo, PatternMatch
from .parser import FilenameNormalizer, PatternMatcher
from .scanner import ProgressCallback

logger = logging.getLogger(__name__)


class DuplicateGrouper:
    """Groups files that share a normalized name, a filename or a pattern identifier."""

    def __init__(
        self,
        matcher: PatternMatcher | None = None,
        normalizer: FilenameNormalizer | None = None,
        config: ApplicationConfig | None = None,
    ):
        """
        Initialize the grouper.

        Args:
            matcher: Compiled identifier patterns, defaults to no patterns
            normalizer: Filename normalizer, defaults to FilenameNormalizer()
            config: Application configuration, used for the worker count
        """
        self.matcher = matcher or PatternMatcher()
        self.normalizer = normalizer or FilenameNormalizer()
        self.config = config or ApplicationConfig()

    def _analyze_file(self, file: FileInfo) -> tuple[str, PatternMatch | None]:
        return self.normalizer.normalize(file.stem), self.matcher.match(file.filename)

    def analyze_files(
        self,
        files: list[FileInfo],
        progress_callback: ProgressCallback | None = None,
    ) -> list[tuple[str, PatternMatch | None]]:
        """
        Normalize and pattern match every file on a bounded worker pool.

        Args:
            files: Files to analyze
            progress_callback: Optional callback, called once per analyzed file

        Returns:
            (normalized key, pattern match) per file, in input order
        """
        if not files:
            return []

        total = len(files)
        results = []
        max_workers = self.config.max_workers or os.cpu_count() or 1
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            for current, result in enumerate(executor.map(self._analyze_file, files), start=1):
                results.append(result)
                if progress_callback:
                    progress_callback(current, total, f"Normalized {current}/{total} files")
        return results

    @staticmethod
    def merge_indices(
        indices: list[int],
        group_index: dict[int, str],
        groups: dict[str, list[int]],
    ) -> None:
        """
        Merge the current groups of the given files into one group.

        The live group of the first index is canonical. Every other index's
        whole group moves into it and the reverse index is updated for each
        moved member.

        Args:
            indices: File indices that must end up in the same group
            group_index: Reverse mapping from file index to its group key
            groups: Mapping from group key to member indices
        """
        if len(indices) < 2:
            return

        canonical = group_index[indices[0]]

        for idx in indices[1:]:
            current = group_index[idx]
            if current == canonical:
                continue

            moved = groups.pop(current)
            for moved_idx in moved:
                group_index[moved_idx] = canonical
            groups[canonical].extend(moved)

    def find_duplicates(
        self,
        files: list[FileInfo],
        progress_callback: ProgressCallback | None = None,
    ) -> list[DuplicateGroup]:
        """
        Find groups of likely duplicates in a single pass.

        Files are grouped together if they match any of the criteria:
        - same normalized name (different resolution / codec / extension)
        - same filename in different directories
        - same identifier from the first matching pattern

        Args:
            files: Files to group
            progress_callback: Optional callback for analysis progress

        Returns:
            Groups with at least two files, sorted by key, members sorted by path
        """
        logger.info(f"Checking {len(files)} files for duplicates...")
        analyses = self.analyze_files(files, progress_callback)

        group_index: dict[int, str] = {}
        groups: dict[str, list[int]] = defaultdict(list)

        # Initial groups from normalized names
        for idx, (key, _) in enumerate(analyses):
            group_index[idx] = key
            groups[key].append(idx)

        # Same filename in different directories
        filename_to_indices: dict[str, list[int]] = defaultdict(list)
        for idx, file in enumerate(files):
            filename_to_indices[file.filename.lower()].append(idx)

        for indices in filename_to_indices.values():
            self.merge_indices(indices, group_index, groups)

        # Same pattern identifier, strictly after the filename merges
        pattern_to_indices: dict[str, list[int]] = defaultdict(list)
        for idx, (_, match) in enumerate(analyses):
            if match is not None:
                pattern_to_indices[match.identifier].append(idx)

        for indices in pattern_to_indices.values():
            self.merge_indices(indices, group_index, groups)

        duplicate_groups = []
        for key in sorted(groups):
            indices = groups[key]
            if len(indices) < 2:
                continue

            members = []
            for idx in indices:
                match = analyses[idx][1]
                pattern_match = (match.start, match.end) if match else None
                members.append(files[idx].model_copy(update={"pattern_match": pattern_match}))

            members.sort(key=lambda f: f.path)
            duplicate_groups.append(DuplicateGroup(key=key, files=members))
            logger.debug(f"Created duplicate group: {key} ({len(members)} files)")

        logger.info(f"Created {len(duplicate_groups)} duplicate groups")
        return duplicate_groups
