"""Custom exceptions for gyp-cli."""


class GypCliError(Exception):
    """Base exception for all gyp-cli errors."""


class PreconditionError(GypCliError):
    """Raised when the manifest file is not in the state an operation requires."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(message)


class ManifestExistsError(PreconditionError):
    """Raised by init when binding.gyp is already present."""

    def __init__(self, path: str):
        super().__init__(path, f"Unable to initialize, {path} already exist!")


class ManifestNotFoundError(PreconditionError):
    """Raised by update when there is no binding.gyp to update."""

    def __init__(self, path: str):
        super().__init__(path, f"Unable to find {path}, can't trigger update!")


class InvalidManifestError(GypCliError):
    """Raised when an existing manifest cannot be parsed."""


class ConfigStoreError(GypCliError):
    """Raised when the local config store cannot be read."""
