"""
Match engine error taxonomy.

Lookups that find nothing return None / an empty list instead of raising.
"""


class MatchingError(Exception):
    """Base class for errors surfaced by the matching core."""


class CatalogLoadError(MatchingError):
    """A catalog source could not be read. The whole load fails, nothing is half-built."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load catalog from {source}: {reason}")


class ProfileValidationError(MatchingError):
    """The applicant profile carries no finite GPA or test score."""
