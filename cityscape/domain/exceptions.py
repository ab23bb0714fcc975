"""
Domain exceptions for the cityscape engine.

Implements a hierarchy distinguishing between recoverable errors at the
external data boundary (unreadable snapshot files, failed fetches) and fatal
errors (configuration misuse, programming bugs) that must fail loudly.

Data-shape problems inside a tree (negative weights, missing attributes,
unknown metric names) are never raised; they are sanitised where they are read.
"""


class CityscapeError(Exception):
    """Base class for all cityscape exceptions."""
    pass


class RecoverableError(CityscapeError):
    """
    Errors the caller can recover from by keeping the previous snapshot.

    Examples:
    - Tree file missing or not valid JSON/YAML
    - Data source fetch failure
    """
    pass


class FatalError(CityscapeError):
    """
    Errors caused by misuse that cannot be rendered around.

    Examples:
    - Non-positive layout extent
    - Inverted metric domains
    """
    pass


class DataSourceError(RecoverableError):
    """Issues reading or fetching a market tree snapshot."""
    pass


class ConfigurationError(FatalError):
    """Invalid engine configuration."""
    pass
