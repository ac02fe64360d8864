from __future__ import annotations

KIB = 1024
MIB = 1024 * KIB

CHUNK_SIZE = 64 * KIB

DEFAULT_SIZE = 10 * MIB
MAX_DOWNLOAD = 100 * MIB
MAX_UPLOAD = 100 * MIB

ENV_DEFAULT_SIZE = "DEFAULT_SIZE"
ENV_MAX_DOWNLOAD = "MAX_DOWNLOAD"
ENV_MAX_UPLOAD = "MAX_UPLOAD"

CONTENT_TYPE_OCTET = "application/octet-stream"

MSG_INTERNAL_ERROR = "Internal server error"
MSG_TOO_LARGE = "Payload too large"
MSG_UPLOAD_FAILED = "Failed to receive upload"
