"""Exception hierarchy shared by the content search stack."""


class ContentSearchError(Exception):
    """Base class for every error raised by content_search."""


class FrontMatterError(ContentSearchError):
    """Raised when a YAML front matter block cannot be parsed."""


class ScanError(ContentSearchError):
    """Raised when a single content file cannot be read or parsed.

    Non-fatal: the scanner logs it, records it in the build report and moves on
    to the next file.
    """

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class IndexFetchError(ContentSearchError):
    """Raised when the search index cannot be fetched from the transport."""
