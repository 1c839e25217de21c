class SchedulerError(Exception):
    """Base class for review scheduling errors"""


class InvalidArgument(SchedulerError, ValueError):
    """Caller passed an empty or malformed identifier or value"""


class StorageError(SchedulerError):
    """The review store could not complete a read or write"""
