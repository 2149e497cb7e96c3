"""External service clients: record store and coach chat."""

from climbcoach.services.chat import CoachChat  # noqa: F401
from climbcoach.services.record_store import (  # noqa: F401
    AirtableRecordStore,
    RecordNotFoundError,
    RecordStoreAuthError,
    RecordStoreError,
)
