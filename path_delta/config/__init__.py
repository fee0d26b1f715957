"""Configuration of a delta detection run.

Inputs are read from the GitHub Actions environment into an
``ActionInputs`` model and validated by ``InputsLoader``:

    from path_delta.config import load_inputs

    inputs = load_inputs()
"""

from .exceptions import (
    ConfigurationError,
    ConfigurationMissingError,
    ConfigurationValidationError,
)
from .loader import InputsLoader, describe_inputs, load_inputs
from .models import ActionInputs, split_patterns

__all__ = [
    "ActionInputs",
    "ConfigurationError",
    "ConfigurationMissingError",
    "ConfigurationValidationError",
    "InputsLoader",
    "describe_inputs",
    "load_inputs",
    "split_patterns",
]
