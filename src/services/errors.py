"""Exceptions raised by the relay services."""


class RelayError(Exception):
    """Base class for relay service failures."""


class HistoryStoreError(RelayError):
    """The history document could not be persisted."""


class CompletionError(RelayError):
    """The upstream completion API failed or returned an unusable response."""
