import logging
import threading
from typing import Any

from ....exceptions import ClientError, StorageError, StreamOpenError
from ...op_ctx import set_op_ctx
from ..oss import OssConfig
from .abstract import AbstractStorage, ListOptions, ListingResult, ReadResult, StreamResult
from .client import OssClient, StorageClient

logger = logging.getLogger(__name__)

#-----------------------------------------------------------------------------

class AliyunStorage(AbstractStorage):
    """
    Aliyun OSS storage facade

    Holds one lazily created OSS client and maps each operation onto a single
    client call, reshaping the result. Configuration is validated once, at
    construction.

    Usage:
        storage = AliyunStorage(
            access_key_id       = "...",
            access_key_secret   = "...",
            endpoint            = "oss-cn-hangzhou.aliyuncs.com",
            bucket              = "my-bucket"
        )

        storage.upload("docs/a.pdf", "/tmp/a.pdf")
        url = storage.sign_url("docs/a.pdf")
    """

    # read_stream() signs with this lifetime whatever config.timeout says.
    STREAM_SIGN_TIMEOUT = 3600

    def __init__(
        self,
        config  : OssConfig | None = None,
        client  : StorageClient | None = None,
        **fields
    ):
        if config is None:
            config = OssConfig(**fields)
        elif fields:
            raise TypeError("Pass either an OssConfig or keyword fields, not both")

        self.config = config

        self._client = client
        self._client_lock = threading.Lock()

        self.initialize()

    #-----------------------------------------------------

    def initialize(self):
        """Validate configuration. Raises ConfigError naming the first missing field."""
        self.config.validate()

    @property
    def bucket(self) -> str:
        return self.config.bucket

    @property
    def timeout(self) -> int:
        return self.config.timeout

    @property
    def is_private(self) -> bool:
        return self.config.is_private

    #-----------------------------------------------------

    def get_client(self) -> StorageClient:
        """
        Get the OSS client, creating it on first use.

        Failures raise ClientError and leave nothing cached, so the next call
        tries again.
        """
        client = self._client
        if client is not None:
            return client

        with self._client_lock:
            if self._client is not None:
                return self._client

            try:
                client = OssClient(
                    self.config.access_key_id,
                    self.config.access_key_secret,
                    self.config.endpoint,
                    connect_timeout=self.config.connect_timeout
                )
            except ClientError as e:
                logger.error(f"Failed to initialize Aliyun OSS client: {str(e)}", exc_info=True)
                raise
            except Exception as e:
                logger.error(f"Failed to initialize Aliyun OSS client: {str(e)}", exc_info=True)
                raise ClientError(str(e)) from e

            self._client = client
            logger.info(f"Aliyun OSS client initialized: bucket={self.bucket}, endpoint={self.config.endpoint}")

            return client


    def set_client(self, client: StorageClient):
        """Replace the held client, e.g. with a test double."""
        with self._client_lock:
            self._client = client

    #-----------------------------------------------------

    def exists(self, path: str) -> bool:
        with set_op_ctx(op="exists", bucket=self.bucket, key=path):
            return self.get_client().does_object_exist(self.bucket, path)

    #-----------------------------------------------------

    def upload(self, remote_path: str, local_path: str) -> str:
        with set_op_ctx(op="upload", bucket=self.bucket, key=remote_path):
            result = self.get_client().upload_file(self.bucket, remote_path, local_path)

            redirects = _redirect_count(result)
            if redirects != 0:
                raise StorageError(f"Upload of '{remote_path}' ended with unexpected redirect count: {redirects}")

            logger.info(f"File uploaded to OSS successfully: {remote_path}")

            return result.get("request_url", "")

    #-----------------------------------------------------

    def sign_url(self, path: str) -> str:
        with set_op_ctx(op="sign_url", bucket=self.bucket, key=path):
            return self.get_client().sign_url(self.bucket, path, self.timeout)

    #-----------------------------------------------------

    def delete(self, path: str) -> bool:
        with set_op_ctx(op="delete", bucket=self.bucket, key=path):
            deleted = self.get_client().delete_object(self.bucket, path) is None
            if deleted:
                logger.info(f"File deleted from OSS successfully: {path}")

            return deleted

    #-----------------------------------------------------

    def create_dir(self, name: str) -> bool:
        dir_name = name.rstrip("/")
        if not dir_name:
            raise ValueError(f"Invalid directory name: {name!r}")

        with set_op_ctx(op="create_dir", bucket=self.bucket, key=dir_name):
            result = self.get_client().create_object_dir(self.bucket, dir_name)

            redirects = _redirect_count(result)
            if redirects is None:
                raise StorageError(f"Malformed response while creating directory '{dir_name}'")

            return redirects == 0

    #-----------------------------------------------------

    def list(self, options: ListOptions | dict | None = None, return_raw: bool = False) -> ListingResult | Any:
        options = ListOptions.from_value(options)

        with set_op_ctx(op="list", bucket=self.bucket, key=options.prefix):
            listing = self.get_client().list_objects(self.bucket, options)
            if return_raw:
                return listing

            return _to_listing_result(listing)


    def list_all(self, options: ListOptions | dict | None = None) -> ListingResult:
        """Follow next_marker across pages and concatenate the results."""
        options = ListOptions.from_value(options)
        result = ListingResult()

        while True:
            listing = self.list(options, return_raw=True)

            page = _to_listing_result(listing)
            result.files.extend(page.files)
            result.dirs.extend(page.dirs)

            next_marker = getattr(listing, "next_marker", "")
            if not getattr(listing, "is_truncated", False) or not next_marker:
                return result

            options = options.replace(marker=next_marker)

    #-----------------------------------------------------

    def read(self, path: str) -> ReadResult:
        with set_op_ctx(op="read", bucket=self.bucket, key=path):
            resource = self.read_stream(path)
            if not resource:
                return ReadResult.not_opened(path)

            stream = resource.stream
            try:
                contents = stream.read()
            except StorageError:
                raise
            except Exception as e:
                raise StorageError(f"Failed to read '{path}': {str(e)}") from e
            finally:
                _close_stream(stream, path)

            return ReadResult(path=path, contents=contents)


    def read_stream(self, path: str) -> StreamResult:
        with set_op_ctx(op="read_stream", bucket=self.bucket, key=path):
            client = self.get_client()
            url = client.sign_url(self.bucket, path, self.STREAM_SIGN_TIMEOUT)

            try:
                stream = client.open_url(self.bucket, url)
            except StreamOpenError as e:
                logger.warning(f"Failed to open OSS object: {str(e)}")
                return StreamResult.not_opened(path)

            return StreamResult(path=path, stream=stream)

#-----------------------------------------------------------------------------

def _redirect_count(result: Any) -> int | None:
    if not isinstance(result, dict):
        return None

    redirects = result.get("redirects")
    if isinstance(redirects, bool) or not isinstance(redirects, int):
        return None

    return redirects


def _close_stream(stream: Any, path: str):
    # A close failure must not mask the read error already propagating.
    try:
        stream.close()
    except Exception as e:
        logger.warning(f"Failed to close OSS object stream for '{path}': {str(e)}", exc_info=True)


def _to_listing_result(listing: Any) -> ListingResult:
    return ListingResult(
        files   = [object_info.key for object_info in listing.object_list],
        dirs    = [prefix if isinstance(prefix, str) else prefix.prefix for prefix in listing.prefix_list]
    )

#-----------------------------------------------------------------------------
