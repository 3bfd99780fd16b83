"""
Exceptions and warning categories for the litterfall pipeline.

Only whole-file structural problems are fatal (`SchemaError`). Row- and
trap-level anomalies are recovered locally and reported with the warning
categories below so a batch always completes.
"""


class SchemaError(ValueError):
    """Raised when a required column is missing or cannot be coerced."""


class LitterfallWarning(UserWarning):
    """Base category for recoverable data anomalies."""


class InsufficientHistoryWarning(LitterfallWarning):
    """A trap series has fewer than two dated observations."""


class ImplausibleValueWarning(LitterfallWarning):
    """A total mass fell outside the plausible range and was nulled."""


class UndefinedRateWarning(LitterfallWarning):
    """Two collections of one trap share a timestamp (zero elapsed days)."""


class UndatedObservationWarning(LitterfallWarning):
    """An observation's year/month/day does not form a valid calendar date."""
