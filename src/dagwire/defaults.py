from dagwire.lifetime import Lifetime

DEFAULT_LIFETIME = Lifetime.TRANSIENT
"""Lifetime used by registrations that omit ``lifetime``."""

DEFAULT_VALIDATE_ON_BUILD = True
"""Whether ``Container`` checks the whole binding graph when it is created."""
