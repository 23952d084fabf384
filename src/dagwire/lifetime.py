from enum import Enum


class Lifetime(str, Enum):
    """Defines how long a constructed instance is reused."""

    TRANSIENT = "transient"
    """A new instance is built for every resolution call."""

    SINGLETON = "singleton"
    """A single instance is built and shared for the lifetime of the resolver."""
