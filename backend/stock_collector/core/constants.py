"""Shared constants and enums used across the collector."""

from enum import StrEnum

ERROR_PREFIX = "ERROR_"
UNAUTHORIZED_PREFIX = "UNAUTHORIZED_"
REJECTION_PREFIXES = (ERROR_PREFIX, UNAUTHORIZED_PREFIX)

SUPPLIER_NUMBER_LENGTH = 6
EMPTY_FILE_SIZE = 0

# Storage path written when a copy never reached the sink
NOT_AVAILABLE_PATH = "NA"


class TransmissionStatus(StrEnum):
    """Lifecycle status of a row in the transmission log."""

    INITIATED = "INITIATED"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    AVAILABLE = "AVAILABLE"
    NOT_AVAILABLE = "NOT_AVAILABLE"


class InboundMethod(StrEnum):
    """Transport a stock file arrived through."""

    SFTP = "SFTP"
    UPLOAD = "Upload"
    EDI = "EDI"


class MailType(StrEnum):
    """Category of a mail-sender event."""

    FILE = "file"


class ValidationState(StrEnum):
    """States of the per-file validation state machine."""

    PENDING = "PENDING"
    AGE_OK = "AGE_OK"
    NAME_OK = "NAME_OK"
    SIZE_OK = "SIZE_OK"
    AUTHORIZED = "AUTHORIZED"
    REJECTED = "REJECTED"


class RejectionReason(StrEnum):
    """Why the validation pipeline refused a file."""

    FILE_TOO_NEW = "FILE_TOO_NEW"
    ALREADY_REJECTED = "ALREADY_REJECTED"
    INVALID_FILE_NAME = "INVALID_FILE_NAME"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"
    EMPTY_FILE = "EMPTY_FILE"
    UNEXPECTED_SUPPLIER_ID = "UNEXPECTED_SUPPLIER_ID"
    SUPPLIER_NOT_AUTHORIZED = "SUPPLIER_NOT_AUTHORIZED"


class SideEffect(StrEnum):
    """Externally visible actions a validation stage performed."""

    RENAMED = "RENAMED"
    DELETED = "DELETED"
    NOTIFIED = "NOTIFIED"
    ALERTED = "ALERTED"


class MailSubject(StrEnum):
    """Subjects of the supplier-facing error mails."""

    FILE_NAME = "Fehler Bestandsmeldung Dropshipping - Dateiname"
    FILE_SIZE = "Fehler Bestandsmeldung Dropshipping - Dateigröße"
    SUPPLIER_ID = "Fehler Bestandsmeldung Dropshipping - LieferantenID"
    AUTHORIZATION = "Fehler Bestandsmeldung Dropshipping - Lieferantenberechtigung"
