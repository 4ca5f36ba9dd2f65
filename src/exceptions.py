"""IIIFNotifications exception classes."""


class IIIFNotificationsError(Exception):
    """Base class for all IIIFNotifications exceptions."""

    # Default HTTP status for API responses
    status_code: int = 500


# Configuration errors
class ConfigError(IIIFNotificationsError):
    """Base class for configuration-related errors."""

    status_code = 500


class DataPathError(ConfigError, ValueError):
    """The configured data directory path is invalid for the requested operation."""

    status_code = 400


# Database errors
class DatabaseError(IIIFNotificationsError):
    """Base class for database-related errors."""

    status_code = 500


# Notification ingestion errors
class NotificationError(IIIFNotificationsError):
    """Base class for notification submission errors."""

    status_code = 400


class UnsupportedContentTypeError(NotificationError, ValueError):
    """The notification was not submitted as application/json."""

    status_code = 415


class InvalidNotificationPayloadError(NotificationError, ValueError):
    """The notification body is not a JSON object."""

    status_code = 400


# Manifest errors
class ManifestError(IIIFNotificationsError):
    """Base class for manifest store failures."""

    status_code = 500


class ManifestImportError(ManifestError, ValueError):
    """A manifest document cannot be stored, usually because it lacks an @id."""

    status_code = 400
