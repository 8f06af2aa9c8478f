# teamdex/errors.py


class TeamdexError(Exception):
    """Base for everything the engine raises on purpose."""


class DataUnavailable(TeamdexError):
    """Relation or species data could not be obtained upstream."""

    def __init__(self, message: str, resource: str | None = None):
        super().__init__(message)
        self.resource = resource


class MalformedProfile(TeamdexError, ValueError):
    """Empty or over-long type list where a real creature profile was expected."""


class UnknownType(TeamdexError, ValueError):
    """Identifier outside the 18 types / 9 habitats."""


class RosterError(TeamdexError, ValueError):
    pass


class RosterFull(RosterError):
    pass


class DuplicateMember(RosterError):
    pass
