from __future__ import annotations


class DomainError(Exception):
    code = "internal_error"


class DomainValidationError(DomainError):
    code = "validation_error"


class MissingIdentityError(DomainValidationError):
    code = "missing_identity"


class MissingFileError(DomainValidationError):
    code = "missing_file"


class UnsupportedFileTypeError(DomainValidationError):
    code = "unsupported_file_type"


class FileTooLargeError(DomainValidationError):
    code = "file_too_large"


class DomainDependencyError(DomainError):
    """A collaborator (record store, object storage) call failed."""

    code = "dependency_failed"


class RecordStoreError(DomainDependencyError):
    code = "record_store_failed"


class StorageUploadError(DomainDependencyError):
    code = "storage_upload_failed"


class NotificationError(DomainError):
    code = "notification_failed"
