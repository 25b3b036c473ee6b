"""Developer productivity metrics computed from GitHub pull requests."""

__version__ = "0.1.0"
