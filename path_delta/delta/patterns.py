"""Include/exclude glob filtering of changed paths.

Glob syntax:
- ``*`` matches any run of characters inside one path segment
- ``?`` matches a single character other than ``/``
- ``[...]`` matches a character class, ``[!...]`` or ``[^...]`` negates it
- ``**`` as a whole segment matches zero or more segments
- ``\\`` escapes the next character

Matching is case-sensitive and always against the full path.
"""

import logging
import re
from collections.abc import Iterable
from functools import lru_cache

from .exceptions import PatternError

logger = logging.getLogger(__name__)


def _translate_class(pattern: str, start: int) -> tuple[str, int]:
    """Translate the character class opening at ``start``.

    Returns the regex fragment and the index just past the closing bracket.
    """
    i = start + 1
    negate = i < len(pattern) and pattern[i] in "!^"
    if negate:
        i += 1

    members: list[str] = []
    # A leading ']' is a literal member, not the end of the class
    if i < len(pattern) and pattern[i] == "]":
        members.append(r"\]")
        i += 1

    while i < len(pattern) and pattern[i] != "]":
        char = pattern[i]
        if char == "\\":
            i += 1
            if i >= len(pattern):
                raise PatternError(f"Trailing escape in pattern '{pattern}'", pattern)
            members.append(re.escape(pattern[i]))
        elif char == "-" and members and i + 1 < len(pattern) and pattern[i + 1] != "]":
            members.append("-")
        elif char == "/":
            raise PatternError(
                f"Path separator inside character class in '{pattern}'", pattern
            )
        else:
            members.append(re.escape(char))
        i += 1

    if i >= len(pattern):
        raise PatternError(f"Unterminated character class in '{pattern}'", pattern)
    if not members:
        raise PatternError(f"Empty character class in '{pattern}'", pattern)

    body = "".join(members)
    return (f"[^/{body}]" if negate else f"[{body}]"), i + 1


def translate_glob(pattern: str) -> str:
    """Translate a glob pattern into an anchored regular expression.

    Raises:
        PatternError: If the pattern is malformed
    """
    parts: list[str] = []
    i = 0
    n = len(pattern)

    while i < n:
        char = pattern[i]

        if char == "*":
            at_segment_start = i == 0 or pattern[i - 1] == "/"
            if pattern.startswith("**", i) and at_segment_start:
                after = i + 2
                if after == n:
                    # Trailing "/**" also matches the directory itself
                    if parts and parts[-1] == "/":
                        parts[-1] = "(?:/.*)?"
                    else:
                        parts.append(".*")
                    i = after
                    continue
                if pattern[after] == "/":
                    parts.append("(?:.*/)?")
                    i = after + 1
                    continue
            # Any other run of stars stays inside one segment
            while i < n and pattern[i] == "*":
                i += 1
            parts.append("[^/]*")
            continue

        if char == "?":
            parts.append("[^/]")
        elif char == "[":
            fragment, i = _translate_class(pattern, i)
            parts.append(fragment)
            continue
        elif char == "\\":
            i += 1
            if i >= n:
                raise PatternError(f"Trailing escape in pattern '{pattern}'", pattern)
            parts.append(re.escape(pattern[i]))
        elif char == "/":
            parts.append("/")
        else:
            parts.append(re.escape(char))
        i += 1

    return "".join(parts)


@lru_cache(maxsize=256)
def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile a glob pattern for full-path matching.

    Raises:
        PatternError: If the pattern is malformed
    """
    try:
        return re.compile(translate_glob(pattern), re.DOTALL)
    except re.error as e:
        raise PatternError(f"Invalid pattern '{pattern}': {e}", pattern) from e


def match_glob(pattern: str, path: str) -> bool:
    """Check whether ``path`` matches ``pattern``.

    Raises:
        PatternError: If the pattern is malformed
    """
    return compile_glob(pattern).fullmatch(path) is not None


class PathFilter:
    """Applies include and exclude pattern lists to changed paths.

    A path is kept when it matches any include pattern (or the include list
    is empty) and matches no exclude pattern. Excludes always win. Empty
    pattern entries are ignored and the empty path is never kept.

    Malformed patterns are logged, recorded in ``invalid_patterns`` and
    skipped; the remaining patterns of the list still apply. An include list
    whose every pattern is malformed therefore includes nothing.
    """

    def __init__(self, includes: Iterable[str] = (), excludes: Iterable[str] = ()):
        self.invalid_patterns: list[str] = []
        self.includes = [p for p in includes if p != ""]
        self.excludes = [p for p in excludes if p != ""]
        self._include_regexes = self._compile_all(self.includes, "include")
        self._exclude_regexes = self._compile_all(self.excludes, "exclude")

    def _compile_all(self, patterns: list[str], kind: str) -> list[re.Pattern[str]]:
        compiled = []
        for pattern in patterns:
            try:
                compiled.append(compile_glob(pattern))
            except PatternError as e:
                logger.warning(f"Ignoring {kind} pattern '{pattern}': {e}")
                self.invalid_patterns.append(pattern)
        return compiled

    @staticmethod
    def _matches_any(path: str, regexes: list[re.Pattern[str]]) -> bool:
        return any(regex.fullmatch(path) for regex in regexes)

    def is_included(self, path: str) -> bool:
        if not self.includes:
            return True
        return self._matches_any(path, self._include_regexes)

    def is_excluded(self, path: str) -> bool:
        return self._matches_any(path, self._exclude_regexes)

    def accepts(self, path: str) -> bool:
        """Check whether a single path survives the filter."""
        if path == "":
            return False
        return self.is_included(path) and not self.is_excluded(path)

    def apply(self, candidates: Iterable[str]) -> list[str]:
        """Return the accepted candidates as a new list, in input order.

        Duplicates are preserved.
        """
        return [path for path in candidates if self.accepts(path)]


def matches_any(path: str, patterns: Iterable[str]) -> bool:
    """Check whether ``path`` matches any usable pattern.

    Empty and malformed patterns never match.
    """
    for pattern in patterns:
        if pattern == "":
            continue
        try:
            if match_glob(pattern, path):
                return True
        except PatternError as e:
            logger.warning(f"Ignoring pattern '{pattern}': {e}")
    return False


def filter_paths(
    candidates: Iterable[str],
    includes: Iterable[str] = (),
    excludes: Iterable[str] = (),
) -> list[str]:
    """Filter changed paths with include and exclude globs."""
    return PathFilter(includes, excludes).apply(candidates)


def validate_patterns(patterns: Iterable[str]) -> list[PatternError]:
    """Compile every non-empty pattern and collect the failures."""
    errors = []
    for pattern in patterns:
        if pattern == "":
            continue
        try:
            compile_glob(pattern)
        except PatternError as e:
            errors.append(e)
    return errors
