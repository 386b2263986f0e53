import io
from types import SimpleNamespace

import pytest

from osskit.exceptions import StorageError, StreamOpenError
from osskit.utils.config import OssConfig
from osskit.utils.config.storage import AliyunStorage, StorageClient, StorageFactory


class FakeStorageClient(StorageClient):
    """In-memory bucket that behaves like OssClient"""

    def __init__(self, objects: dict[str, bytes] | None = None, redirects: int | None = 0):
        self.objects = dict(objects or {})
        self.redirects = redirects
        self.calls = []
        self.opened = []

    def does_object_exist(self, bucket, key):
        self.calls.append(("does_object_exist", bucket, key))
        return key in self.objects

    def upload_file(self, bucket, key, local_file):
        self.calls.append(("upload_file", bucket, key, local_file))
        try:
            with open(local_file, "rb") as f:
                self.objects[key] = f.read()
        except OSError as e:
            raise StorageError(str(e)) from e
        return {"request_url": f"https://{bucket}.oss.example.com/{key}", "redirects": self.redirects}

    def sign_url(self, bucket, key, timeout, method="GET"):
        self.calls.append(("sign_url", bucket, key, timeout))
        return f"https://{bucket}.oss.example.com/{key}?Expires={timeout}&Signature=sig"

    def delete_object(self, bucket, key):
        self.calls.append(("delete_object", bucket, key))
        self.objects.pop(key, None)
        return None

    def create_object_dir(self, bucket, dir_name):
        self.calls.append(("create_object_dir", bucket, dir_name))
        self.objects[f"{dir_name}/"] = b""
        return {"request_url": f"https://{bucket}.oss.example.com/{dir_name}/", "redirects": self.redirects}

    def list_objects(self, bucket, options):
        self.calls.append(("list_objects", bucket, options))

        files, prefixes = [], []
        keys = sorted(k for k in self.objects if k > options.marker and k.startswith(options.prefix))

        count = 0
        last_key = ""
        truncated = False
        for key in keys:
            if count >= options.max_keys:
                truncated = True
                break

            rest = key[len(options.prefix):]
            index = rest.find(options.delimiter) if options.delimiter else -1
            if index >= 0:
                common = options.prefix + rest[:index + len(options.delimiter)]
                if common not in prefixes:
                    prefixes.append(common)
                    count += 1
            else:
                files.append(SimpleNamespace(key=key, size=len(self.objects[key])))
                count += 1
            last_key = key

        return SimpleNamespace(
            object_list = files,
            prefix_list = prefixes,
            is_truncated= truncated,
            next_marker = last_key if truncated else ""
        )

    def open_url(self, bucket, url):
        key = url.split(".oss.example.com/", 1)[1].split("?", 1)[0]
        if key not in self.objects:
            raise StreamOpenError(f"NoSuchKey: {key}", status=404, code="NoSuchKey")

        stream = io.BytesIO(self.objects[key])
        self.opened.append(stream)
        return stream


@pytest.fixture
def oss_config():
    return OssConfig(
        access_key_id       = "LTAI5tExampleKeyId",
        access_key_secret   = "ExampleSecretValue",
        endpoint            = "oss-cn-hangzhou.aliyuncs.com",
        bucket              = "test-bucket",
        timeout             = 600
    )


@pytest.fixture
def fake_client():
    return FakeStorageClient({
        "a.txt"             : b"hello",
        "photos/1.jpg"      : b"\xff\xd8one",
        "photos/2.jpg"      : b"\xff\xd8two",
        "photos/2024/3.jpg" : b"\xff\xd8three",
        "readme.md"         : b"# readme",
    })


@pytest.fixture
def storage(oss_config, fake_client):
    return AliyunStorage(config=oss_config, client=fake_client)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (
        "ENV",
        "OSS_ACCESS_KEY_ID",
        "OSS_ACCESS_KEY_SECRET",
        "OSS_ENDPOINT",
        "OSS_BUCKET",
        "OSS_TIMEOUT",
        "OSS_IS_PRIVATE",
        "OSS_CONNECT_TIMEOUT",
        "LOG_NAME",
        "LOG_DIR",
        "LOG_LEVEL",
    ):
        # setenv first so teardown also removes values written by load_dotenv.
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)

    StorageFactory.reset()
    yield
    StorageFactory.reset()
