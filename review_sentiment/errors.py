class SentimentError(Exception):
    """Base class for every failure the classifier reports to its caller."""


class EmptyDatasetError(SentimentError):
    """Training was requested on a dataset without rows."""


class InsufficientDataError(SentimentError):
    """Features and labels disagree in length, or only one label class is present."""


class InvalidArtifactError(SentimentError):
    """A model artifact is corrupted, of the wrong type or internally inconsistent."""


class IngestionError(SentimentError):
    """A review source could not be read or holds a malformed record."""
