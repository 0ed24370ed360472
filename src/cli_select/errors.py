"""Exceptions raised by select dialogs."""


class SelectError(Exception):
    """Base class for every failure a select dialog reports."""

    pass


class KeyBindingError(SelectError, ValueError):
    """Raised when a key cannot be bound to navigation.

    Either the name is not a known key, or it is the confirm key: a dialog
    whose confirm key is consumed by navigation could never be confirmed.
    """

    pass


class EmptyItemsError(SelectError, ValueError):
    """Raised by ``start()`` when there is nothing to select."""

    pass


class EventSourceError(SelectError):
    """Raised when the next key event cannot be read."""

    pass


class ConfigError(SelectError, ValueError):
    """Raised when a stored or environment setting has an unusable value."""

    pass
