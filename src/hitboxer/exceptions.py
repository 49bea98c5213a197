"""Exception hierarchy for Hitboxer."""


class HitboxerError(Exception):
    """Base exception for all Hitboxer errors."""

    pass


class InvalidParametersError(HitboxerError, ValueError):
    """A pipeline invocation was called with parameters outside its contract.

    Raised synchronously for a single sprite/tier invocation; other sprites in
    a batch are unaffected.
    """

    def __init__(self, parameter: str, reason: str) -> None:
        self.parameter = parameter
        self.reason = reason
        super().__init__(f"Invalid parameter '{parameter}': {reason}")


class ImageError(HitboxerError):
    """Errors related to sprite sheet images."""

    pass


class ImageLoadError(ImageError):
    """Error loading a sprite sheet image."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load image '{path}': {reason}")


class MetadataError(HitboxerError):
    """Errors related to metadata persistence."""

    pass


class MetadataSaveError(MetadataError):
    """Error writing a metadata or preview file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save '{path}': {reason}")

