class ImageValidationError(Exception):
    """Rejected upload: wrong extension/MIME type or over the size limit."""


class StorageError(Exception):
    """Any failure coming from the relational store."""


class DuplicateEmailError(StorageError):
    pass
