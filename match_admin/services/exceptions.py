"""Error taxonomy for the match admin services.

Routes map each class to a specific operator-facing message and status code.
"""

from __future__ import annotations


class MatchAdminError(Exception):
    """Base class for every error the admin surfaces to an operator."""


class ConfigurationError(MatchAdminError):
    """A required credential or setting is missing."""


class RemoteFetchError(MatchAdminError):
    """Reading matches from the database failed."""


class MatchNotFoundError(RemoteFetchError):
    """No match exists with the requested id."""

    def __init__(self, match_id: object) -> None:
        super().__init__(f"Match {match_id} not found")
        self.match_id = match_id


class RemoteUpdateError(MatchAdminError):
    """Writing a match patch failed; nothing was persisted."""


class ValidationError(MatchAdminError, ValueError):
    """Operator-entered or inferred data failed shape/type checks."""


class InferenceUnavailable(MatchAdminError):
    """The model reply could not be turned into a trusted result."""
