class CookbookFSError(Exception):
    """Base class for all cookbookfs errors."""


class NameGrammarError(CookbookFSError):
    """A name is not of the form ``{package}-{version}``."""

    def __init__(self, name, message=None):
        self.name = name
        super().__init__(message or f"not a versioned cookbook name: {name!r}")


class InvalidVersionedName(NameGrammarError):
    """Raised by the upload staging protocol before anything is staged."""


class NotFoundError(CookbookFSError):
    """An entry does not exist in its backend."""

    def __init__(self, entry, message=None):
        self.entry = entry
        super().__init__(message or f"{entry.path_for_printing} not found")


class RestOperationError(CookbookFSError):
    """Wraps httpx errors so callers never handle transport exceptions."""

    def __init__(self, message, status_code=None):
        self.status_code = status_code
        super().__init__(message)


class RemoteListingError(RestOperationError):
    """A read against the server failed or returned undecodable JSON."""


class StagingIOError(CookbookFSError):
    """Creating or removing staging state failed."""


class LoadError(CookbookFSError):
    """Cookbook content could not be loaded from disk."""


class UploadError(CookbookFSError):
    """The server rejected or failed a cookbook upload."""

    def __init__(self, message, status_code=None):
        self.status_code = status_code
        super().__init__(message)
