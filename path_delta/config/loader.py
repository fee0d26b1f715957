"""Action input loading and validation.

The loader builds ``ActionInputs`` from the process environment (or an
explicit mapping), then checks the cross-field preconditions a run needs.
Failures are raised as typed configuration errors; terminating the process
is left to the entry point.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from path_delta.delta.patterns import validate_patterns

from .exceptions import (
    ConfigurationMissingError,
    ConfigurationValidationError,
)
from .models import ActionInputs

logger = logging.getLogger(__name__)


class InputsLoader:
    """Handles loading and validation of action inputs."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        """Initialize inputs loader.

        Args:
            environ: Variables to read instead of the process environment
        """
        self._environ = environ
        self._inputs: ActionInputs | None = None

    @property
    def inputs(self) -> ActionInputs | None:
        return self._inputs

    def load(self, validate: bool = True) -> ActionInputs:
        """Load inputs from the environment.

        Args:
            validate: Whether to check run preconditions after loading

        Returns:
            Loaded inputs

        Raises:
            ConfigurationValidationError: If a value cannot be parsed or a pattern is invalid
            ConfigurationMissingError: If a mandatory value is missing
        """
        try:
            if self._environ is None:
                inputs = ActionInputs()
            else:
                inputs = ActionInputs.model_validate(self._select(self._environ))
        except ValidationError as e:
            raise ConfigurationValidationError(
                f"Failed to parse action inputs: {e}", validation_errors=e.errors()
            ) from e

        self._inputs = inputs
        if validate:
            self.validate(inputs)
        return inputs

    @staticmethod
    def _select(environ: Mapping[str, str]) -> dict[str, Any]:
        prefixes = ("INPUT_", "GITHUB_")
        return {k: v for k, v in environ.items() if k.startswith(prefixes)}

    def validate(self, inputs: ActionInputs) -> None:
        """Check the preconditions of a run.

        Raises:
            ConfigurationMissingError: If a mandatory value is missing
            ConfigurationValidationError: If any include or exclude pattern is invalid
        """
        missing = []
        if inputs.requires_token and not inputs.github_token:
            if inputs.environment:
                missing.append("github_token (required when an environment is given)")
            else:
                missing.append("github_token (required in online mode)")
        if not inputs.repository:
            missing.append("repository (GITHUB_REPOSITORY)")
        if not inputs.current_revision:
            missing.append("current revision (GITHUB_SHA or INPUT_COMMIT)")

        if missing:
            raise ConfigurationMissingError(
                f"Missing required inputs: {', '.join(missing)}",
                missing_fields=missing,
            )

        errors = validate_patterns(inputs.include_patterns) + validate_patterns(
            inputs.exclude_patterns
        )
        if errors:
            raise ConfigurationValidationError(
                "Invalid glob patterns: " + "; ".join(str(e) for e in errors),
                validation_errors=[e.pattern for e in errors],
            )

        logger.debug(
            f"Inputs valid: repository={inputs.repository}, mode={inputs.mode.value}, "
            f"environment={inputs.environment!r}, branch={inputs.branch!r}"
        )


def load_inputs(environ: Mapping[str, str] | None = None) -> ActionInputs:
    """Load and validate action inputs.

    Raises:
        ConfigurationError: If the inputs are unusable
    """
    return InputsLoader(environ).load()


def describe_inputs(inputs: ActionInputs) -> dict[str, Any]:
    """Summarize inputs for logging, without secrets."""
    return {
        "repository": inputs.repository,
        "current_revision": inputs.current_revision,
        "mode": inputs.mode.value,
        "environment": inputs.environment,
        "branch": inputs.branch,
        "include_patterns": inputs.include_patterns,
        "exclude_patterns": inputs.exclude_patterns,
        "event_name": inputs.event_name,
        "ref": inputs.ref,
        "workflow": inputs.workflow,
        "job": inputs.job,
        "github_token": "***" if inputs.github_token else "",
        "output_path": inputs.output_path or "",
    }
