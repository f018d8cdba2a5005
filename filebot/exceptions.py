"""Custom exception classes for the file search bot."""


class FileBotException(Exception):
    """
    Base exception class for all bot errors.
    """
    pass


class EmptyKeywordListError(FileBotException):
    """
    Raised when an upload caption yields no keywords.
    """
    pass


class DuplicateFileError(FileBotException):
    """
    Raised when a file with the same payload id is already stored.
    """
    pass


class InvalidSelectionError(FileBotException):
    """
    Raised when a selection payload is not a valid result index.
    """
    pass


class UnsupportedMediaKindError(FileBotException):
    """
    Raised when a media kind is not one of document, photo, video, audio.
    """
    pass


class StorageUnavailableError(FileBotException):
    """
    Raised when the File Store or the Quota Tracker cannot be read or written.
    """
    pass


class DeliveryFailedError(FileBotException):
    """
    Raised when the delivery transport rejects a file or times out.
    """
    pass


class UnauthorizedFrontendError(FileBotException):
    """
    Raised when the front-end presents a missing or wrong API key.
    """
    pass
