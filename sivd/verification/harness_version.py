# sivd/verification/harness_version.py
# Harness version constants. Single authoritative definition.
# Referenced by run_harness.py, record_serializer.py, record_loader.py
# and failure_handler.py for version stamping.

HARNESS_VERSION: str = "1.0.0"

# Storage format version of the JSON fingerprint record.
# Records with a different format version are rejected by RecordLoader.
STORAGE_FORMAT_VERSION: str = "1.0.0"

# Identifier of the pinned hash construction. Records hashed with a
# different construction cannot be compared.
FINGERPRINT_ALGORITHM: str = "fnv1a-64/ieee754-be"
