import logging
import threading
from contextlib import contextmanager
from typing import Any
from urllib.parse import urlparse

from ....exceptions import ClientError, StorageError, StreamOpenError
from .abstract import ListOptions

logger = logging.getLogger(__name__)

#-----------------------------------------------------------------------------

class StorageClient:
    """Operations the storage facade consumes from an object storage client"""

    def does_object_exist(self, bucket: str, key: str) -> bool: ...

    def upload_file(self, bucket: str, key: str, local_file: str) -> dict[str, Any]:
        """Returns {"request_url": str, "redirects": int | None}"""
        ...

    def sign_url(self, bucket: str, key: str, timeout: int, method: str = "GET") -> str: ...

    def delete_object(self, bucket: str, key: str) -> Any:
        """Returns None on success"""
        ...

    def create_object_dir(self, bucket: str, dir_name: str) -> dict[str, Any]:
        """Returns {"request_url": str, "redirects": int | None}"""
        ...

    def list_objects(self, bucket: str, options: ListOptions) -> Any:
        """Returns a listing exposing object_list (entries with .key) and prefix_list"""
        ...

    def open_url(self, bucket: str, url: str) -> Any:
        """Returns a readable, closeable stream. Raises StreamOpenError."""
        ...

#-----------------------------------------------------------------------------

class ObjectStream:
    """Readable body of a GET on a signed URL"""

    def __init__(self, result):
        self._result = result
        self.closed = False


    def read(self, amt: int | None = None) -> bytes:
        return self._result.read(amt)


    def __iter__(self):
        return iter(self._result)


    def close(self):
        if self.closed:
            return

        self.closed = True
        self._result.resp.response.close()


    def __enter__(self):
        return self


    def __exit__(self, *exc_info):
        self.close()

#-----------------------------------------------------------------------------

def _response_info(result) -> dict[str, Any]:
    # oss2 results wrap the requests.Response of the final hop.
    response = getattr(getattr(result, "resp", None), "response", None)
    if response is None:
        return {"request_url": "", "redirects": None}

    history = getattr(response, "history", None)
    return {
        "request_url"   : getattr(response, "url", "") or "",
        "redirects"     : len(history) if isinstance(history, list) else None
    }

#-----------------------------------------------------------------------------

@contextmanager
def _oss_errors(message: str):
    import oss2

    try:
        yield

    except oss2.exceptions.OssError as e:
        detail = getattr(e, "message", "") or getattr(e, "code", "") or str(e)
        raise StorageError(
            f"{message}: {detail}",
            status      = getattr(e, "status", 0),
            code        = getattr(e, "code", ""),
            request_id  = getattr(e, "request_id", "")
        ) from e

#-----------------------------------------------------------------------------

class OssClient(StorageClient):
    """Aliyun OSS implementation of StorageClient on top of oss2"""

    def __init__(
        self,
        access_key_id       : str,
        access_key_secret   : str,
        endpoint            : str,
        connect_timeout     : int | None = None
    ):
        if not access_key_id:
            raise ClientError("access key id is empty")
        if not access_key_secret:
            raise ClientError("access key secret is empty")

        self._endpoint_url = self._normalize_endpoint(endpoint)
        self._connect_timeout = connect_timeout

        # oss2 still ships invalid escape sequences.
        import warnings
        warnings.filterwarnings("ignore", category=SyntaxWarning, module="oss2")
        import oss2
        self._oss2 = oss2
        self._auth = oss2.Auth(access_key_id, access_key_secret)

        self._buckets = {}
        self._lock = threading.Lock()

    #-----------------------------------------------------

    @staticmethod
    def _normalize_endpoint(endpoint: str) -> str:
        endpoint = endpoint.strip() if endpoint else ""
        if not endpoint:
            raise ClientError("endpoint is empty")

        url = endpoint if "://" in endpoint else f"https://{endpoint}"

        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.hostname or any(c.isspace() for c in endpoint):
            raise ClientError(f"malformed endpoint: {endpoint}")

        return url.rstrip("/")

    #-----------------------------------------------------

    def _bucket(self, name: str):
        bucket = self._buckets.get(name)
        if bucket is not None:
            return bucket

        with self._lock:
            bucket = self._buckets.get(name)
            if bucket is None:
                with _oss_errors(f"Invalid bucket '{name}'"):
                    bucket = self._oss2.Bucket(
                        self._auth,
                        self._endpoint_url,
                        name,
                        connect_timeout=self._connect_timeout
                    )
                self._buckets[name] = bucket

        return bucket

    #-----------------------------------------------------

    def does_object_exist(self, bucket: str, key: str) -> bool:
        with _oss_errors(f"Failed to check object '{key}'"):
            return self._bucket(bucket).object_exists(key)


    def upload_file(self, bucket: str, key: str, local_file: str) -> dict[str, Any]:
        with _oss_errors(f"Failed to upload '{local_file}' to '{key}'"):
            try:
                result = self._bucket(bucket).put_object_from_file(key, local_file)
            except OSError as e:
                raise StorageError(f"Failed to read local file '{local_file}': {str(e)}") from e

        return _response_info(result)


    def sign_url(self, bucket: str, key: str, timeout: int, method: str = "GET") -> str:
        with _oss_errors(f"Failed to sign URL for '{key}'"):
            return self._bucket(bucket).sign_url(method, key, timeout)


    def delete_object(self, bucket: str, key: str) -> Any:
        with _oss_errors(f"Failed to delete object '{key}'"):
            self._bucket(bucket).delete_object(key)

        return None


    def create_object_dir(self, bucket: str, dir_name: str) -> dict[str, Any]:
        with _oss_errors(f"Failed to create directory '{dir_name}'"):
            result = self._bucket(bucket).put_object(f"{dir_name}/", b"")

        return _response_info(result)


    def list_objects(self, bucket: str, options: ListOptions) -> Any:
        with _oss_errors(f"Failed to list bucket '{bucket}'"):
            return self._bucket(bucket).list_objects(
                prefix      = options.prefix,
                delimiter   = options.delimiter,
                marker      = options.marker,
                max_keys    = options.max_keys
            )


    def open_url(self, bucket: str, url: str) -> ObjectStream:
        try:
            result = self._bucket(bucket).get_object_with_url(url)

        except self._oss2.exceptions.OssError as e:
            raise StreamOpenError(
                f"Failed to open signed URL: {getattr(e, 'code', '') or str(e)}",
                status      = getattr(e, "status", 0),
                code        = getattr(e, "code", ""),
                request_id  = getattr(e, "request_id", "")
            ) from e

        return ObjectStream(result)

#-----------------------------------------------------------------------------
