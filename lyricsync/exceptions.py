"""Custom Exceptions for the LyricSync application."""

class LyricSyncError(Exception):
    """Base class for exceptions in this module."""
    pass

class ConfigurationError(LyricSyncError):
    """Exception raised for errors in configuration loading."""
    pass

class TranslationError(LyricSyncError):
    """Exception raised when the translation provider fails."""
    pass

class LyricsProviderError(LyricSyncError):
    """Exception raised when the lyrics provider cannot be reached or answers badly."""
    pass

class PlaybackError(LyricSyncError):
    """Exception raised when the playback source cannot report the current track."""
    pass

class FileSystemError(LyricSyncError):
    """Exception raised for file system related errors (permissions, not found etc)."""
    pass
