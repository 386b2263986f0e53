from dataclasses import dataclass, field
from enum import Enum
from typing import Any

#-----------------------------------------------------------------------------

MAX_KEYS_DEFAULT = 100
MAX_KEYS_LIMIT   = 1000

#-----------------------------------------------------------------------------

class ListOptions:
    """
    Options for listing objects in a bucket.

    Args:
        max_keys: Maximum number of entries returned, 1..1000
        prefix: Only keys starting with this prefix. Returned keys still carry it.
        delimiter: Grouping character. Keys sharing the prefix up to the first
            delimiter after it are collapsed into a single directory entry.
        marker: Listing starts after this key in lexicographic order.
    """

    # OSS query parameter names mapped to attribute names.
    WIRE_NAMES = {
        "max-keys"  : "max_keys",
        "prefix"    : "prefix",
        "delimiter" : "delimiter",
        "marker"    : "marker",
    }

    def __init__(
        self,
        max_keys    : int = MAX_KEYS_DEFAULT,
        prefix      : str = "",
        delimiter   : str = "",
        marker      : str = ""
    ):
        if not isinstance(max_keys, int) or isinstance(max_keys, bool) or not 1 <= max_keys <= MAX_KEYS_LIMIT:
            raise ValueError(f"max_keys must be an integer between 1 and {MAX_KEYS_LIMIT}, got {max_keys!r}")

        self.max_keys   = max_keys
        self.prefix     = prefix or ""
        self.delimiter  = delimiter or ""
        self.marker     = marker or ""


    @classmethod
    def from_value(cls, options: "ListOptions | dict | None") -> "ListOptions":
        if options is None:
            return cls()

        if isinstance(options, ListOptions):
            return options

        if not isinstance(options, dict):
            raise TypeError(f"Unsupported list options: {type(options).__name__}")

        kwargs = {}
        for key, value in options.items():
            name = cls.WIRE_NAMES.get(key, key)
            if name not in cls.WIRE_NAMES.values():
                raise ValueError(f"Unknown list option: {key}")
            kwargs[name] = int(value) if name == "max_keys" and isinstance(value, str) else value

        return cls(**kwargs)


    def replace(self, **changes) -> "ListOptions":
        values = {
            "max_keys"  : self.max_keys,
            "prefix"    : self.prefix,
            "delimiter" : self.delimiter,
            "marker"    : self.marker,
        }
        values.update(changes)
        return ListOptions(**values)


    def __eq__(self, other):
        if not isinstance(other, ListOptions):
            return NotImplemented
        return (self.max_keys, self.prefix, self.delimiter, self.marker) == \
            (other.max_keys, other.prefix, other.delimiter, other.marker)


    def __repr__(self):
        return f"ListOptions(max_keys={self.max_keys}, prefix={self.prefix!r}, delimiter={self.delimiter!r}, marker={self.marker!r})"

#-----------------------------------------------------------------------------

@dataclass
class ListingResult:
    files   : list[str] = field(default_factory=list)
    dirs    : list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {"files": list(self.files), "dirs": list(self.dirs)}

#-----------------------------------------------------------------------------

class ReadStatus(str, Enum):
    OK          = "ok"
    NOT_OPENED  = "not_opened"

#-----------------------------------------------------------------------------

@dataclass
class ReadResult:
    """Contents of a fetched object. Falsy when the object could not be opened."""

    path        : str
    status      : ReadStatus = ReadStatus.OK
    contents    : bytes | None = None

    def __bool__(self):
        return self.status == ReadStatus.OK

    @classmethod
    def not_opened(cls, path: str) -> "ReadResult":
        return cls(path=path, status=ReadStatus.NOT_OPENED)

#-----------------------------------------------------------------------------

@dataclass
class StreamResult:
    """
    An open object stream. Falsy when the object could not be opened.

    The caller drains and closes `stream`.
    """

    path        : str
    status      : ReadStatus = ReadStatus.OK
    stream      : Any = None

    def __bool__(self):
        return self.status == ReadStatus.OK

    @classmethod
    def not_opened(cls, path: str) -> "StreamResult":
        return cls(path=path, status=ReadStatus.NOT_OPENED)

#-----------------------------------------------------------------------------

class AbstractStorage:
    """Abstract base class for object storage facades"""

    def exists(self, path: str) -> bool:
        """
        Check whether an object exists

        Args:
            path: Object key

        Returns:
            True if the object exists in the configured bucket
        """
        ...

    def upload(self, remote_path: str, local_path: str) -> str:
        """
        Upload a local file

        Args:
            remote_path: Object key to write
            local_path: Local file to read

        Returns:
            Request URL reported by the storage client
        """
        ...

    def sign_url(self, path: str) -> str:
        """
        Sign a temporary GET URL for an object. The object is not checked for existence.

        Args:
            path: Object key

        Returns:
            Signed URL
        """
        ...

    def delete(self, path: str) -> bool:
        """
        Delete an object

        Args:
            path: Object key

        Returns:
            True on success
        """
        ...

    def create_dir(self, name: str) -> bool:
        """
        Create a virtual directory marker

        Args:
            name: Directory name, with or without trailing slash

        Returns:
            True on success
        """
        ...

    def list(self, options: ListOptions | dict | None = None, return_raw: bool = False) -> ListingResult | Any:
        """
        List objects in the bucket

        Args:
            options: Listing options
            return_raw: Return the client's native listing instead

        Returns:
            ListingResult, or the raw listing when return_raw is set
        """
        ...

    def read(self, path: str) -> ReadResult:
        """
        Read a whole object into memory
        """
        ...

    def read_stream(self, path: str) -> StreamResult:
        """
        Open an object for streaming
        """
        ...

    def get_storage_type(self) -> str:
        """
        Get storage type identifier
        """
        return self.__class__.__name__.lower().removesuffix("storage")

#-----------------------------------------------------------------------------
