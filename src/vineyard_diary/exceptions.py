"""Application exception classes."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class SnapshotError(Exception):
    """Raised when a weather snapshot file cannot be used for a restore."""
