"""Error kinds raised by the obscuration pipeline."""


class ObscurationError(Exception):
    """Base class for every failure surfaced by ``process()``."""


class InvalidImage(ObscurationError, ValueError):
    """Empty image or unreadable pixel data."""


class DetectionUnavailable(ObscurationError, RuntimeError):
    """The face detector could not be constructed or invoked."""


class DimensionMismatch(ObscurationError, ValueError):
    """Images handed to the compositor are not pixel-aligned."""


class FilterConstructionFailure(ObscurationError):
    """A stage cannot be built from the parameters it was given."""
