"""
Unit tests for delta engine orchestration.

Why: The engine wires base resolution, diffing and filtering together; the
     factories must pick the right strategy for each input combination.

What: Tests DeltaEngine.run with stub strategies and the strategy factory
      selection rules.

How: Uses AsyncMock-backed stubs; no network or repository access.
"""

from collections.abc import Callable
from unittest.mock import AsyncMock, Mock

import pytest

from path_delta.config.models import ActionInputs
from path_delta.delta.diff import DiffProvider, LocalDiffProvider, RemoteDiffProvider
from path_delta.delta.engine import (
    DeltaEngine,
    create_diff_provider,
    create_engine,
    create_revision_strategy,
)
from path_delta.delta.exceptions import DiffError, RevisionError
from path_delta.delta.models import DiffMode
from path_delta.delta.revisions import (
    BranchRevisionStrategy,
    DeploymentRevisionStrategy,
    RevisionStrategy,
)


def stub_engine(base: str, changed: list[str]) -> tuple[DeltaEngine, Mock, Mock]:
    revisions = Mock(spec=RevisionStrategy)
    revisions.resolve_base = AsyncMock(return_value=base)
    provider = Mock(spec=DiffProvider)
    provider.diff = AsyncMock(return_value=changed)
    return DeltaEngine(revisions, provider), revisions, provider


class TestDeltaEngine:
    """Test the resolve, diff and filter pipeline."""

    @pytest.mark.asyncio
    async def test_include_filter_applied(
        self, make_inputs: Callable[..., ActionInputs]
    ) -> None:
        engine, _, provider = stub_engine("base1", ["file1.txt", "file2.go"])

        result = await engine.run(make_inputs(sha="head2", includes="*.go"))

        assert result.detected
        assert result.files == ["file2.go"]
        provider.diff.assert_awaited_once_with("base1", "head2")

    @pytest.mark.asyncio
    async def test_no_changes_not_detected(
        self, make_inputs: Callable[..., ActionInputs]
    ) -> None:
        engine, _, _ = stub_engine("base1", [])

        result = await engine.run(make_inputs())

        assert not result.detected
        assert result.files == []

    @pytest.mark.asyncio
    async def test_everything_excluded_not_detected(
        self, make_inputs: Callable[..., ActionInputs]
    ) -> None:
        engine, _, _ = stub_engine("base1", ["prod/a.yaml", "prod/b.yaml"])

        result = await engine.run(make_inputs(excludes="prod/**"))

        assert not result.detected

    @pytest.mark.asyncio
    async def test_deletions_are_dropped(self, make_inputs: Callable[..., ActionInputs]) -> None:
        engine, _, _ = stub_engine("base1", ["", "go.mod", ""])

        result = await engine.run(make_inputs())

        assert result.files == ["go.mod"]

    @pytest.mark.asyncio
    async def test_commit_input_is_current_revision(
        self, make_inputs: Callable[..., ActionInputs]
    ) -> None:
        engine, _, provider = stub_engine("base1", [])

        await engine.run(make_inputs(sha="runner-sha", commit="explicit"))

        provider.diff.assert_awaited_once_with("base1", "explicit")

    @pytest.mark.asyncio
    async def test_empty_base_is_passed_through(
        self, make_inputs: Callable[..., ActionInputs], caplog: pytest.LogCaptureFixture
    ) -> None:
        engine, _, provider = stub_engine("", ["a.go"])

        result = await engine.run(make_inputs(sha="head2"))

        provider.diff.assert_awaited_once_with("", "head2")
        assert result.files == ["a.go"]
        assert "No base revision found" in caplog.text

    @pytest.mark.asyncio
    async def test_revision_error_propagates(
        self, make_inputs: Callable[..., ActionInputs]
    ) -> None:
        engine, revisions, provider = stub_engine("", [])
        revisions.resolve_base.side_effect = RevisionError("listing failed")

        with pytest.raises(RevisionError):
            await engine.run(make_inputs())

        provider.diff.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_diff_error_propagates(self, make_inputs: Callable[..., ActionInputs]) -> None:
        engine, _, provider = stub_engine("base1", [])
        provider.diff.side_effect = DiffError("compare failed", base="base1")

        with pytest.raises(DiffError):
            await engine.run(make_inputs())


class TestStrategySelection:
    """Test factory selection rules."""

    def test_environment_selects_deployments(
        self, make_inputs: Callable[..., ActionInputs]
    ) -> None:
        strategy = create_revision_strategy(make_inputs(environment="production"), Mock())

        assert isinstance(strategy, DeploymentRevisionStrategy)
        assert strategy.environment == "production"
        assert strategy.coordinates.name == "repo"

    def test_environment_wins_over_branch(
        self, make_inputs: Callable[..., ActionInputs]
    ) -> None:
        inputs = make_inputs(environment="production", branch="main", offline=True)

        assert isinstance(create_revision_strategy(inputs, Mock()), DeploymentRevisionStrategy)

    def test_environment_requires_client(
        self, make_inputs: Callable[..., ActionInputs]
    ) -> None:
        with pytest.raises(ValueError):
            create_revision_strategy(make_inputs(environment="production"))

    def test_online_branch(self, make_inputs: Callable[..., ActionInputs]) -> None:
        strategy = create_revision_strategy(make_inputs(branch="develop"), Mock())

        assert isinstance(strategy, BranchRevisionStrategy)
        assert strategy.mode == DiffMode.REMOTE
        assert strategy.ref_name == "refs/heads/develop"

    def test_offline_branch(self, make_inputs: Callable[..., ActionInputs]) -> None:
        strategy = create_revision_strategy(
            make_inputs(offline=True), repo_path="/work/repo"
        )

        assert isinstance(strategy, BranchRevisionStrategy)
        assert strategy.mode == DiffMode.LOCAL
        assert strategy.repo_path == "/work/repo"

    def test_diff_provider_follows_mode(self, make_inputs: Callable[..., ActionInputs]) -> None:
        assert isinstance(create_diff_provider(make_inputs(), Mock()), RemoteDiffProvider)
        assert isinstance(create_diff_provider(make_inputs(offline=True)), LocalDiffProvider)

    def test_remote_diff_requires_client(
        self, make_inputs: Callable[..., ActionInputs]
    ) -> None:
        with pytest.raises(ValueError):
            create_diff_provider(make_inputs())

    def test_offline_with_environment_mixes_backends(
        self, make_inputs: Callable[..., ActionInputs]
    ) -> None:
        engine = create_engine(
            make_inputs(offline=True, environment="production"), Mock(), "/work/repo"
        )

        assert isinstance(engine.revision_strategy, DeploymentRevisionStrategy)
        assert isinstance(engine.diff_provider, LocalDiffProvider)
