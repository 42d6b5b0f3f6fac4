"""
Search Errors Module - Exceptions raised before a run is constructed.
"""


class ConfigurationError(ValueError):
    """
    Invalid grid or run configuration.

    Raised for non-positive grid sizes, out-of-bounds or coinciding
    start/goal coordinates and invalid panel counts. Never raised by
    step() - exhaustion is reported through RunState instead.
    """
    pass


class SessionLockedError(RuntimeError):
    """Grid edit attempted while a run is still in progress."""
    pass
