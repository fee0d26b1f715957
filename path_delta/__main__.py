"""Entry point for delta detection in a GitHub Actions step."""

import argparse
import asyncio
import contextlib
import logging
import sys
from collections.abc import Sequence

from path_delta.config import ActionInputs, ConfigurationError, describe_inputs, load_inputs
from path_delta.delta import DeltaError, DeltaResult, create_engine
from path_delta.github import (
    GitHubClient,
    GitHubClientConfig,
    GitHubOutput,
    TokenAuth,
    publish_result,
)

logger = logging.getLogger("path_delta")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="path-delta",
        description="Detect changed paths since the last deployment or branch tip",
    )
    parser.add_argument(
        "--repo-path",
        default=".",
        help="Local repository used in offline mode (default: current directory)",
    )
    parser.add_argument("--log-level", default="INFO", help="Log level")
    return parser.parse_args(argv)


async def detect(inputs: ActionInputs, repo_path: str) -> DeltaResult:
    """Run the engine, opening a GitHub client only when one is needed."""
    async with contextlib.AsyncExitStack() as stack:
        client = None
        if inputs.requires_token:
            client = await stack.enter_async_context(
                GitHubClient(
                    TokenAuth(inputs.github_token),
                    GitHubClientConfig(base_url=inputs.api_url),
                )
            )

        engine = create_engine(inputs, client=client, repo_path=repo_path)
        return await engine.run(inputs)


async def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point. Returns the process exit status."""
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        inputs = load_inputs()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    logger.info(f"Detecting changes with inputs: {describe_inputs(inputs)}")

    try:
        result = await detect(inputs, args.repo_path)
    except DeltaError as e:
        logger.error(f"Delta detection failed: {e}")
        return 1

    logger.info(f"Detected: {result.detected}, files: {result.files}")
    publish_result(result, GitHubOutput(inputs.output_path))
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
