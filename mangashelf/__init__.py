"""Shared package for the mangashelf catalogue services."""

from .environment import load_environment

# Load environment variables from .env-style files as soon as the package is
# imported so the API key is visible to the configuration layer.
load_environment()

__all__ = ["load_environment"]
