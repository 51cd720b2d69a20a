class ExternalServiceError(Exception):
    """The summarization model could not be loaded or raised during inference."""


class OutputQualityError(Exception):
    """The summarization model returned text that is not usable as a resume."""


class PersistenceError(Exception):
    """A write to the document store or the metadata store failed."""
