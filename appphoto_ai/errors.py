"""Exception types shared across AppPhoto AI."""


class AppPhotoError(Exception):
    """Base class for AppPhoto AI errors."""


class ConfigurationError(AppPhotoError, ValueError):
    """Raised when required configuration (such as the API key) is missing."""


class InvalidImageError(AppPhotoError, ValueError):
    """Raised when a selected file is not a readable still image."""


class AnalysisError(AppPhotoError):
    """Raised when the model reply cannot be turned into extracted records."""
