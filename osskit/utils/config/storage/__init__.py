"""
Aliyun OSS storage facade

Usage:
    from osskit.utils.config.storage import get_storage_client

    # Get storage client (built from the global Config on first call)
    storage = get_storage_client()

    # Upload file
    request_url = storage.upload("uploads/file.pdf", "/tmp/file.pdf")

    # Temporary URL
    url = storage.sign_url("uploads/file.pdf")

    # Read file
    result = storage.read("uploads/file.pdf")
    if result:
        data = result.contents
"""

from .abstract import (
    AbstractStorage,
    ListOptions,
    ListingResult,
    ReadResult,
    ReadStatus,
    StreamResult
)
from .client import StorageClient, OssClient, ObjectStream
from .aliyun import AliyunStorage
from .factory import StorageFactory, get_storage_client

#-----------------------------------------------------------------------------

__all__ = [
    "AbstractStorage",
    "AliyunStorage",

    "StorageClient",
    "OssClient",
    "ObjectStream",

    "ListOptions",
    "ListingResult",
    "ReadResult",
    "ReadStatus",
    "StreamResult",

    "StorageFactory",
    "get_storage_client",
]
