"""Changed-path detection for CI pipelines.

Compares the current revision against a base revision (the latest
successful deployment to an environment, or the tip of a branch) and
reports the changed paths that pass include/exclude glob filters.

Usage:
    python -m path_delta [--repo-path PATH] [--log-level LEVEL]

Structure:
    path_delta/
    ├── __main__.py     # Entry point
    ├── config/         # Action inputs and validation
    ├── delta/          # Revision resolution, diff providers, filtering, engine
    └── github/         # GitHub API client and Actions outputs
"""

__version__ = "0.1.0"
