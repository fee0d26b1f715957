"""
Unit tests for include/exclude glob filtering.

Why: The filter decides which changed paths gate a CI job, so its glob
     semantics and include/exclude precedence must be exact.

What: Tests glob translation, PathFilter precedence, empty-list semantics,
      order and duplicate preservation, and per-pattern error tolerance.

How: Applies filters to in-memory path lists; no repository or network.
"""

import logging

import pytest

from path_delta.delta.exceptions import PatternError
from path_delta.delta.patterns import (
    PathFilter,
    compile_glob,
    filter_paths,
    match_glob,
    matches_any,
    validate_patterns,
)

PATHS = [
    "Dockerfile",
    "go.mod",
    "go.sum",
    "cmd/main.go",
    "prod/abc/ecd/file.txt",
    "prod/service.yaml",
    "docs/readme.md",
    "file.txt",
]


class TestGlobMatching:
    """Test single-pattern glob semantics."""

    @pytest.mark.parametrize(
        "pattern,path,expected",
        [
            ("**/*", "prod/abc/ecd/file.txt", True),
            ("**/*", "file.txt", True),
            ("prod/*", "file.txt", False),
            ("prod/*", "prod/service.yaml", True),
            ("prod/*", "prod/abc/ecd/file.txt", False),
            ("prod/**/*", "prod/abc/ecd/file.txt", True),
            ("prod/**/*", "prod/service.yaml", True),
            ("prod/**", "prod/abc/ecd/file.txt", True),
            ("prod/**", "prod", True),
            ("prod/**", "production/file.txt", False),
            ("**", "a/b/c", True),
            ("**/*.go", "cmd/main.go", True),
            ("**/*.go", "main.go", True),
            ("*.go", "cmd/main.go", False),
            ("*.go", "file2.go", True),
            ("go.???", "go.mod", True),
            ("go.???", "go.sum", True),
            ("go.?", "go.mod", False),
            ("file[12].txt", "file1.txt", True),
            ("file[12].txt", "file3.txt", False),
            ("file[!12].txt", "file3.txt", True),
            ("file[a-c].txt", "fileb.txt", True),
            ("Dockerfile", "dockerfile", False),
            ("a**b", "axxb", True),
            ("a**b", "ax/xb", False),
            ("docs/**/readme.md", "docs/readme.md", True),
            (r"file\*.txt", "file*.txt", True),
            (r"file\*.txt", "file1.txt", False),
        ],
    )
    def test_match_glob(self, pattern: str, path: str, expected: bool) -> None:
        assert match_glob(pattern, path) is expected

    def test_question_mark_does_not_cross_segments(self) -> None:
        assert not match_glob("prod?file", "prod/file")

    def test_dots_are_literal(self) -> None:
        assert not match_glob("go.mod", "goxmod")

    @pytest.mark.parametrize("pattern", ["file[12.txt", "trailing\\", "[]", "[z-a]"])
    def test_malformed_patterns_raise(self, pattern: str) -> None:
        with pytest.raises(PatternError) as exc_info:
            compile_glob(pattern)

        assert exc_info.value.pattern == pattern

    def test_validate_patterns_collects_failures(self) -> None:
        errors = validate_patterns(["*.go", "", "bad[", "ok/**", "also[bad"])

        assert [e.pattern for e in errors] == ["bad[", "also[bad"]


class TestPathFilter:
    """Test include/exclude precedence and list semantics."""

    def test_include_all_exclude_none(self) -> None:
        assert filter_paths(["Dockerfile", "go.mod", "go.sum"], ["**"], []) == [
            "Dockerfile",
            "go.mod",
            "go.sum",
        ]

    def test_include_by_extension(self) -> None:
        assert filter_paths(["file1.txt", "file2.go"], ["*.go"], []) == ["file2.go"]

    def test_exclude_overrides_include(self) -> None:
        result = filter_paths(PATHS, ["**"], ["prod/**"])

        assert "prod/abc/ecd/file.txt" not in result
        assert "prod/service.yaml" not in result
        assert "Dockerfile" in result

    def test_path_matching_both_lists_is_dropped(self) -> None:
        assert filter_paths(["go.mod"], ["go.*"], ["*.mod"]) == []

    def test_any_include_pattern_is_enough(self) -> None:
        result = filter_paths(PATHS, ["*.mod", "cmd/*"], [])

        assert result == ["go.mod", "cmd/main.go"]

    def test_empty_include_list_includes_everything(self) -> None:
        excludes = ["docs/**"]

        assert filter_paths(PATHS, [], excludes) == filter_paths(PATHS, ["**"], excludes)

    def test_empty_exclude_list_excludes_nothing(self) -> None:
        assert filter_paths(PATHS, ["**"], []) == PATHS

    def test_empty_pattern_entries_are_ignored(self) -> None:
        # A list of only empty entries behaves like an empty list
        assert filter_paths(PATHS, ["", ""], [""]) == PATHS

    def test_empty_path_is_always_dropped(self) -> None:
        assert filter_paths(["", "go.mod", ""], [], []) == ["go.mod"]
        assert filter_paths([""], ["**"], []) == []

    def test_order_is_preserved(self) -> None:
        paths = ["z.go", "a.go", "m.txt", "b.go"]

        assert filter_paths(paths, ["*.go"], []) == ["z.go", "a.go", "b.go"]

    def test_duplicates_are_preserved(self) -> None:
        assert filter_paths(["a.go", "a.go", "b.txt"], ["*.go"], []) == ["a.go", "a.go"]

    def test_filter_returns_new_list(self) -> None:
        paths = ["a.go", "b.txt"]
        result = filter_paths(paths, [], [])

        assert result == paths
        assert result is not paths

    @pytest.mark.parametrize(
        "includes,excludes",
        [
            ([], []),
            (["**"], ["docs/**"]),
            (["*.go", "prod/**"], ["prod/abc/**"]),
            (["go.*"], ["*.sum"]),
        ],
    )
    def test_filter_is_idempotent(self, includes: list[str], excludes: list[str]) -> None:
        once = filter_paths(PATHS, includes, excludes)

        assert filter_paths(once, includes, excludes) == once


class TestInvalidPatterns:
    """Test that malformed patterns are skipped, logged and counted."""

    def test_invalid_include_is_skipped_others_apply(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            path_filter = PathFilter(["bad[", "*.go"], [])
            result = path_filter.apply(["main.go", "notes.txt"])

        assert result == ["main.go"]
        assert path_filter.invalid_patterns == ["bad["]
        assert "bad[" in caplog.text

    def test_invalid_exclude_is_skipped_others_apply(self) -> None:
        path_filter = PathFilter([], ["bad[", "*.txt"])

        assert path_filter.apply(["main.go", "notes.txt"]) == ["main.go"]
        assert path_filter.invalid_patterns == ["bad["]

    def test_all_includes_invalid_includes_nothing(self) -> None:
        path_filter = PathFilter(["bad[", "also[bad"], [])

        assert path_filter.apply(PATHS) == []
        assert len(path_filter.invalid_patterns) == 2

    def test_matches_any_skips_invalid_patterns(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            assert matches_any("main.go", ["bad[", "*.go"])
            assert not matches_any("main.go", ["bad["])

        assert "bad[" in caplog.text
