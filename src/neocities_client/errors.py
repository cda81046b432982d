"""Root of the NeoCities client exception hierarchy."""


class NeocitiesError(Exception):
    """Base exception for all NeoCities client errors."""

    pass
