"""Exceptions raised while resolving, planning and fetching benchmark ranges."""

from typing import Dict, Optional


class RangeBenchError(Exception):
    """Base exception for benchmark errors."""


class NotFoundError(RangeBenchError):
    """Raised by a storage system when a location does not address an object."""

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"Object not found: {location}")


class ResolutionError(RangeBenchError):
    """Raised when a location resolves to neither an object nor a populated prefix."""

    def __init__(self, location: str, cause: Optional[Exception] = None) -> None:
        self.location = location
        self.cause = cause
        message = f"Could not resolve location {location!r}"
        if cause:
            message = f"{message}: {cause}"
        super().__init__(message)


class SizeMismatchError(RangeBenchError):
    """Raised when the objects under test do not share one size."""

    def __init__(self, sizes: Dict[str, int]) -> None:
        self.sizes = sizes
        distinct = sorted(set(sizes.values()))
        super().__init__(
            f"All objects must have the same size, found {len(distinct)} "
            f"distinct sizes across {len(sizes)} objects: {distinct}"
        )


class InvalidLayoutError(RangeBenchError):
    """Raised when the requested layout cannot produce a single block or group."""


class FetchFailure(RangeBenchError):
    """Raised when a range get fails; terminal for the whole run."""

    def __init__(self, location: str, start: int, end: int, cause: BaseException) -> None:
        self.location = location
        self.start = start
        self.end = end
        self.cause = cause
        super().__init__(f"Failed to fetch {location} range [{start}, {end}): {cause}")
