"""Filename normalization and identifier pattern matching."""

import re

from .errors import ConfigurationError
from .models import PatternMatch

RESOLUTION_PATTERNS = ["720p", "1080p", "1440p", "2160p"]
CODEC_PATTERNS = ["x264", "x265", "h264", "h265"]

# Characters stripped from both ends of a normalized name
SEPARATOR_CHARS = "._- "


class FilenameNormalizer:
    """Derives a canonical grouping key from a file stem."""

    def __init__(self, codecs: list[str] | None = None):
        """
        Initialize the normalizer and compile its regexes.

        Args:
            codecs: Codec tokens to remove, defaults to CODEC_PATTERNS
        """
        codecs = codecs or CODEC_PATTERNS
        # Matches 720p, 1080p, ... as well as WIDTHxHEIGHT
        self.resolution_regex = re.compile(r"\b(\d{3,4}p|\d{3,4}x\d{3,4})\b", re.IGNORECASE)
        self.codec_regex = re.compile(
            r"\b({})\b".format("|".join(re.escape(codec) for codec in codecs)), re.IGNORECASE
        )
        self.multi_dots_regex = re.compile(r"\.{2,}")
        self.multi_spaces_regex = re.compile(r"\s{2,}")

    def normalize(self, stem: str) -> str:
        """
        Normalize a file stem by removing resolution and codec tokens.

        Args:
            stem: File name without extension

        Returns:
            Lowercase key, or the lowercase stem if nothing would remain

        Example:
            >>> FilenameNormalizer().normalize("Movie.Title.2024.1080p.x265")
            'movie.title.2024'
        """
        lowered = stem.lower()

        normalized = self.resolution_regex.sub("", lowered)
        normalized = self.codec_regex.sub("", normalized)
        normalized = self.multi_dots_regex.sub(".", normalized)
        normalized = self.multi_spaces_regex.sub(" ", normalized)
        normalized = normalized.strip(SEPARATOR_CHARS)

        return normalized or lowered


class PatternMatcher:
    """Finds a user-configured identifier in a filename."""

    def __init__(self, patterns: list[re.Pattern[str]] | None = None):
        """
        Initialize the matcher.

        Args:
            patterns: Compiled patterns in priority order
        """
        self.patterns = list(patterns or [])

    @classmethod
    def compile(cls, raw_patterns: list[str]) -> "PatternMatcher":
        """
        Compile user patterns into a matcher.

        Args:
            raw_patterns: Regex strings in priority order

        Returns:
            PatternMatcher holding the compiled patterns

        Raises:
            ConfigurationError: If any pattern is not a valid regex
        """
        compiled = []
        for raw in dict.fromkeys(raw_patterns):
            try:
                compiled.append(re.compile(raw))
            except re.error as e:
                raise ConfigurationError(f"Invalid regex pattern '{raw}': {e}") from e
        return cls(compiled)

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def match(self, filename: str) -> PatternMatch | None:
        """
        Find the identifier in a filename using the first matching pattern.

        Later patterns are never consulted once one has matched. Zero-length
        matches are ignored and the next pattern is tried.

        Args:
            filename: The filename to search

        Returns:
            PatternMatch with the matched text and offsets, None if no pattern matches
        """
        for pattern in self.patterns:
            found = pattern.search(filename)
            # An empty match carries no identifier
            if found and found.end() > found.start():
                return PatternMatch(identifier=found.group(0), start=found.start(), end=found.end())
        return None
