"""Errors raised by the stride detection."""


class ConfigurationError(ValueError):
    """The provided configuration can not be used to run the stride detection.

    This is raised before any detection is performed.
    """


class DataQualityError(ValueError):
    """The provided data does not allow to detect any stride.

    This is raised, if fewer than two midswing peaks could be found for one of the feet.
    """


__all__ = ["ConfigurationError", "DataQualityError"]
