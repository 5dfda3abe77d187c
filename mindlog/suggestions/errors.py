class SuggestionError(Exception):
    """Base class for suggestion pipeline and lifecycle failures."""


class ExtractionError(SuggestionError):
    """The extraction call failed: network, timeout, or a malformed model response.

    Retryable. Entries of the failed run stay unanalyzed so a later run picks them up.
    """


class NotFoundError(SuggestionError):
    """The requested suggestion or entry does not exist."""


class ForbiddenError(SuggestionError):
    """The requesting user does not own the record."""


class StorageError(SuggestionError):
    """The persistence layer failed; the run or operation was rolled back."""
