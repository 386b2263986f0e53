from .exceptions import (
    OssKitException,

    ConfigError,
    ClientError,
    StorageError,
    StreamOpenError
)

from .utils.config import Config, OssConfig

from .utils.config.storage import (
    AliyunStorage,
    ListOptions,
    ListingResult,
    ReadResult,
    ReadStatus,
    StreamResult,

    get_storage_client
)
