"""Error taxonomy for the screenshot ingestion pipeline."""


class ScribeError(RuntimeError):
    """Base class for all Screen Scribe errors."""


class FileProcessingError(ScribeError):
    """A single file could not be processed. Recoverable; the loop continues."""


class ExtractionError(FileProcessingError):
    """OCR could not produce text for an image."""


class GenerationError(FileProcessingError):
    """The text-generation service did not produce a response."""


class PersistenceError(FileProcessingError):
    """The generated response could not be written to disk."""


class DirectoryListingError(ScribeError):
    """The input directory could not be listed. Fatal."""


class StartupConfigError(ScribeError):
    """Configuration is missing or malformed. Fatal, raised before the loop starts."""
