"""Fatal conditions that stop an aggregation run without partial output."""


class EvidenceError(ValueError):
    """Base class for errors raised while assembling evidence."""


class DatabaseNotFoundError(EvidenceError):
    """No protein database records are available to roll up against."""

    def __init__(self, message: str = "Cannot locate protein database data"):
        super().__init__(message)


class ReferenceTableNotFoundError(EvidenceError):
    """The reference modification (UniMod) table is missing or empty."""

    def __init__(self, message: str = "Cannot locate the reference modification table"):
        super().__init__(message)


class EmptyIdentificationError(EvidenceError):
    """There are no identifications to aggregate."""

    def __init__(self, message: str = "No PSM identifications were provided"):
        super().__init__(message)
