class SprigError(Exception):
    """Base class for every error the sprig core reports to its caller."""


class UserInputError(SprigError):
    """Malformed request: bad operands, empty message, missing or duplicate repository."""


class NotFoundError(SprigError):
    """Unknown commit, branch, blob or path."""


class PreconditionError(SprigError):
    """The repository is not in a state that allows the operation."""
