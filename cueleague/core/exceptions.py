"""
Error taxonomy for the scorekeeping core.

Every user-triggerable failure is a ``LeagueError`` carrying a readable
message and the HTTP status the API answers with. ``main.py`` installs a
single handler for the whole family, so services never raise
``HTTPException`` themselves.
"""
from fastapi import status


class LeagueError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidScore(LeagueError):
    pass


class InvalidPlayer(LeagueError):
    pass


class SelfMatch(LeagueError):
    pass


class RematchLimitReached(LeagueError):
    status_code = status.HTTP_409_CONFLICT


class NotFound(LeagueError):
    status_code = status.HTTP_404_NOT_FOUND


class RulesLocked(LeagueError):
    pass


class InvalidCredentials(LeagueError):
    status_code = status.HTTP_401_UNAUTHORIZED


class InternalStoreError(LeagueError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class StoreConflict(InternalStoreError):
    """A uniqueness constraint rejected a write made by a concurrent request."""
    status_code = status.HTTP_409_CONFLICT


class InvalidRules(LeagueError):
    pass


class KeyLimitReached(LeagueError):
    status_code = status.HTTP_409_CONFLICT
