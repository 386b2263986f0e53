from types import SimpleNamespace
from unittest import mock

import oss2
import pytest

from osskit.exceptions import ClientError, StorageError, StreamOpenError
from osskit.utils.config.storage import ListOptions, ObjectStream, OssClient


def _result(url="https://bucket.oss-cn-hangzhou.aliyuncs.com/key", history=None):
    response = mock.Mock(url=url, history=history if history is not None else [])
    return SimpleNamespace(resp=SimpleNamespace(response=response))


def _oss_error(cls, status, code):
    return cls(status, {"x-oss-request-id": "req-1"}, b"", {"Code": code, "Message": f"{code} message"})


@pytest.fixture
def bucket():
    with mock.patch("oss2.Bucket") as bucket_class:
        yield bucket_class.return_value


@pytest.fixture
def client(bucket):
    return OssClient("id", "secret", "oss-cn-hangzhou.aliyuncs.com", connect_timeout=10)

#-----------------------------------------------------------------------------

@pytest.mark.parametrize("args", [
    ("", "secret", "oss-cn-hangzhou.aliyuncs.com"),
    ("id", "", "oss-cn-hangzhou.aliyuncs.com"),
    ("id", "secret", ""),
    ("id", "secret", "ftp://oss-cn-hangzhou.aliyuncs.com"),
    ("id", "secret", "https://"),
])
def test_construction_failures(args):
    with pytest.raises(ClientError):
        OssClient(*args)


def test_bucket_is_created_once_with_https_endpoint(bucket, client):
    with mock.patch("oss2.Bucket") as bucket_class:
        client.does_object_exist("photos", "a.txt")
        client.does_object_exist("photos", "b.txt")

    bucket_class.assert_called_once()
    args, kwargs = bucket_class.call_args

    assert args[1] == "https://oss-cn-hangzhou.aliyuncs.com"
    assert args[2] == "photos"
    assert kwargs["connect_timeout"] == 10


def test_explicit_scheme_is_kept():
    with mock.patch("oss2.Bucket") as bucket_class:
        OssClient("id", "secret", "http://127.0.0.1:9000/").does_object_exist("b", "k")

    assert bucket_class.call_args[0][1] == "http://127.0.0.1:9000"

#-----------------------------------------------------------------------------

def test_does_object_exist(bucket, client):
    bucket.object_exists.return_value = True

    assert client.does_object_exist("b", "a.txt") is True
    bucket.object_exists.assert_called_once_with("a.txt")


def test_oss_errors_become_storage_errors(bucket, client):
    bucket.object_exists.side_effect = _oss_error(oss2.exceptions.AccessDenied, 403, "AccessDenied")

    with pytest.raises(StorageError) as exc_info:
        client.does_object_exist("b", "a.txt")

    error = exc_info.value
    assert error.status == 403
    assert error.code == "AccessDenied"
    assert error.request_id == "req-1"
    assert isinstance(error.__cause__, oss2.exceptions.OssError)


def test_upload_file_reports_url_and_redirects(bucket, client):
    bucket.put_object_from_file.return_value = _result(url="https://b.example.com/docs/a.pdf")

    result = client.upload_file("b", "docs/a.pdf", "/tmp/a.pdf")

    assert result == {"request_url": "https://b.example.com/docs/a.pdf", "redirects": 0}
    bucket.put_object_from_file.assert_called_once_with("docs/a.pdf", "/tmp/a.pdf")


def test_upload_file_counts_redirect_history(bucket, client):
    bucket.put_object_from_file.return_value = _result(history=[mock.Mock(), mock.Mock()])

    assert client.upload_file("b", "k", "/tmp/a")["redirects"] == 2


def test_upload_file_missing_local_file(bucket, client):
    bucket.put_object_from_file.side_effect = FileNotFoundError("no such file")

    with pytest.raises(StorageError):
        client.upload_file("b", "k", "/tmp/missing")


def test_sign_url(bucket, client):
    bucket.sign_url.return_value = "https://signed"

    assert client.sign_url("b", "a.txt", 600) == "https://signed"
    bucket.sign_url.assert_called_once_with("GET", "a.txt", 600)


def test_delete_object_returns_none(bucket, client):
    assert client.delete_object("b", "a.txt") is None
    bucket.delete_object.assert_called_once_with("a.txt")


def test_create_object_dir_puts_empty_marker(bucket, client):
    bucket.put_object.return_value = _result()

    result = client.create_object_dir("b", "albums")

    bucket.put_object.assert_called_once_with("albums/", b"")
    assert result["redirects"] == 0


def test_list_objects_passes_options(bucket, client):
    client.list_objects("b", ListOptions(max_keys=50, prefix="p/", delimiter="/", marker="p/a"))

    bucket.list_objects.assert_called_once_with(prefix="p/", delimiter="/", marker="p/a", max_keys=50)

#-----------------------------------------------------------------------------

def test_open_url_wraps_result(bucket, client):
    result = mock.Mock()
    result.read.return_value = b"data"
    bucket.get_object_with_url.return_value = result

    stream = client.open_url("b", "https://signed")

    assert isinstance(stream, ObjectStream)
    assert stream.read() == b"data"

    stream.close()
    stream.close()

    result.resp.response.close.assert_called_once_with()


def test_open_url_failure_raises_stream_open_error(bucket, client):
    bucket.get_object_with_url.side_effect = _oss_error(oss2.exceptions.NoSuchKey, 404, "NoSuchKey")

    with pytest.raises(StreamOpenError) as exc_info:
        client.open_url("b", "https://signed")

    assert exc_info.value.status == 404
