"""GitFlow release automation on top of the GitHub API."""

__version__ = "1.0.0"
