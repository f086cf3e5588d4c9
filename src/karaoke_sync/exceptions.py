"""Custom exceptions for karaoke_sync."""

SYNC_FAILED_MESSAGE = "Karaoke sync failed, please retry"


class KaraokeSyncError(Exception):
    """Base exception for karaoke_sync."""
    pass


class ConfigError(KaraokeSyncError):
    """Invalid configuration value."""
    pass


class ValidationError(KaraokeSyncError):
    """Invalid input parameters."""
    pass


class OracleError(KaraokeSyncError):
    """An upstream model call (segmenter or aligner) failed."""
    pass


class SegmenterResponseError(KaraokeSyncError):
    """Line segmenter output is not a well-formed array of line objects."""
    pass


class SyncFailedError(KaraokeSyncError):
    """The sync request failed as a whole; no partial result is available."""

    def __init__(self, reason: str = ""):
        self.reason = reason
        super().__init__(SYNC_FAILED_MESSAGE)

    @property
    def user_message(self) -> str:
        return SYNC_FAILED_MESSAGE
