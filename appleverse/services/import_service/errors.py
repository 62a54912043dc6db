"""Exceptions raised by the dataset import pipeline."""


class DatasetImportError(Exception):
    """Base class for fatal dataset import failures."""


class DatasetNotFoundError(DatasetImportError):
    """The dataset file does not exist."""


class UnsupportedFileTypeError(DatasetImportError):
    """The dataset file extension is not one the reader understands."""


class DatasetReadError(DatasetImportError):
    """The dataset file exists but its content could not be parsed."""


class NoUsableRowsError(DatasetImportError):
    """No row in the dataset carries a cultivar name."""
