class CsvCleanError(Exception):
    """Base class for every failure that ends a cleaning run."""


class UsageError(CsvCleanError):
    pass


class NotFoundError(CsvCleanError):
    pass


class ExtensionError(CsvCleanError):
    pass


class DetectionError(CsvCleanError):
    pass


class EncodingMismatchError(CsvCleanError):
    pass


class CleanError(CsvCleanError):
    pass


class ReplaceError(CsvCleanError):
    pass
