"""Error types shared across the offline core."""


class AapdaMitraError(Exception):
    """Base class for all application errors."""


class StorageError(AapdaMitraError):
    """A read or write against the local store failed."""


class GenerationError(AapdaMitraError):
    """The text-generation oracle could not produce a response."""


class NoGatewayError(AapdaMitraError):
    """No reachable gateway peer exists in the current mesh."""
