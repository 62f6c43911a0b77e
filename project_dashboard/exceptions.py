"""Failure kinds surfaced to the dashboard user.

Only two failures are user visible: not being signed in, and the
project list being unavailable. Everything else degrades to the
"Not specified" sentinel instead of raising.
"""


class DashboardError(Exception):
    """Base class for dashboard failures."""


class Unauthorized(DashboardError):
    """The caller has no authenticated session."""

    def __init__(self, message: str = 'Unauthorized'):
        super().__init__(message)
        self.message = message


class DataUnavailable(DashboardError):
    """The project list could not be fetched.

    Fetching is all-or-nothing, so there is never a partially loaded
    result attached to this error.
    """

    def __init__(self, message: str = 'Failed to fetch projects from database'):
        super().__init__(message)
        self.message = message
