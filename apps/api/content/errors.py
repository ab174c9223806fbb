"""Error taxonomy for the content persistence layer."""


class ContentStoreError(Exception):
    """Base class for content persistence failures."""


class RemoteUnavailable(ContentStoreError):
    """Remote store could not be reached, refused access or failed to initialize."""


class RecordNotFound(ContentStoreError, LookupError):
    """No record exists for the given identifier."""

    def __init__(self, collection: str, record_id: str):
        super().__init__(f"{collection} record {record_id!r} not found")
        self.collection = collection
        self.record_id = record_id


class OversizedAsset(ContentStoreError):
    """Embedded image still exceeds the per-record size ceiling."""

    def __init__(self, size: int, limit: int):
        super().__init__(
            f"Thumbnail image is too large ({size} characters, limit {limit}). "
            "Use a smaller image."
        )
        self.size = size
        self.limit = limit


class CorruptAsset(ContentStoreError):
    """Uploaded image could not be decoded."""


class CompressionTimeout(ContentStoreError, TimeoutError):
    """Image compression exceeded its deadline."""
