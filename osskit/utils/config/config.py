import dotenv, logging, os

from typing import Any

from .log import LogConfig
from .oss import OssConfig, DEFAULT_SIGN_TIMEOUT, DEFAULT_CONNECT_TIMEOUT

#-----------------------------------------------------------------------------

_global_config = None

#-----------------------------------------------------------------------------

class Config:
    """
    Process settings.

    Environment variables win over the values passed in. `.env` files only
    fill variables that are not set yet.
    """

    def __init__(
        self,
        values          : dict | None = None,
        dotenv_filenames: str | list[str] | None = None
    ):
        self._raw = {}

        Config.load_dotenv(dotenv_filenames)
        self.refresh(values)

        global _global_config
        _global_config = self

    #-----------------------------------------------------

    def refresh(self, data: dict | None = None):
        if data:
            self._raw.update({k.strip().upper(): v for k, v in data.items() if isinstance(k, str)})

        self.log = LogConfig(
            name    = self.get_str("LOG_NAME"),
            dir     = self.get_str("LOG_DIR"),
            level   = logging.getLevelNamesMapping().get(self.get_str("LOG_LEVEL").strip().upper(), logging.INFO)
        )

        self.oss = self.get_oss()

    #-----------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        upper_key = key.strip().upper()
        if not upper_key:
            return default

        s = os.environ.get(key.strip())
        if s is None:
            s = os.environ.get(upper_key)
        if s is not None:
            return s

        return self._raw.get(upper_key, default)


    def get_str(self, key: str, default: str = "") -> str:
        s = self.get(key)
        if s is None:
            return default
        return s if isinstance(s, str) else str(s)


    def get_int(self, key: str, default: int = 0) -> int:
        obj = self.get(key)

        if isinstance(obj, bool):
            return default

        if isinstance(obj, int):
            return obj

        try:
            return int(obj)
        except (TypeError, ValueError):
            return default


    def get_bool(self, key: str, default: bool = False) -> bool:
        obj = self.get(key)

        if isinstance(obj, bool):
            return obj

        if isinstance(obj, str):
            return obj.strip().upper() in ("TRUE", "1", "YES")

        if isinstance(obj, int):
            return obj != 0

        return default

    #-----------------------------------------------------

    def get_oss(self) -> OssConfig:
        return OssConfig(
            access_key_id       = self.get_str("OSS_ACCESS_KEY_ID"),
            access_key_secret   = self.get_str("OSS_ACCESS_KEY_SECRET"),
            endpoint            = self.get_str("OSS_ENDPOINT"),
            bucket              = self.get_str("OSS_BUCKET"),
            timeout             = self.get_int("OSS_TIMEOUT", DEFAULT_SIGN_TIMEOUT),
            is_private          = self.get_bool("OSS_IS_PRIVATE"),
            connect_timeout     = self.get_int("OSS_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT)
        )


    def get_storage(self):
        from .storage.aliyun import AliyunStorage
        return AliyunStorage(config=self.get_oss())

    #-----------------------------------------------------

    def print(self):
        print("----------------------------------------------------------")
        print(f"env             : {os.environ.get('ENV', '').strip().lower()}")
        print(f"debug           : {self.log.level <= logging.DEBUG}")

        self.log.print()
        self.oss.print()

        print("----------------------------------------------------------")

    #-------------------------------------------------------------------------

    @staticmethod
    def to_masked_str(s: str) -> str:
        n = len(s)
        if n <= 0:
            return ""
        if n < 6:
            return "************"

        return f"{s[:3]}******{s[n-3:]}"

    #-------------------------------------------------------------------------

    @staticmethod
    def load_dotenv(filenames: str | list[str] | None = None):
        if isinstance(filenames, str):
            filenames = [filenames]
        elif not isinstance(filenames, list):
            return

        for filename in filenames:
            filename = filename.strip()
            if not filename:
                continue

            for key, value in dotenv.dotenv_values(filename).items():
                value = value.strip() if value else ""
                key = key.strip() if key else ""
                if key and value:
                    os.environ.setdefault(key.upper(), value)

    #-------------------------------------------------------------------------

    @staticmethod
    def init(
        dotenv_filenames: str | list[str] | None = None,
        log_extra       : dict | None = None
    ) -> "Config":
        """Load settings and route logging through the JSON formatter."""
        from ..log import init_log

        log_extra = log_extra if log_extra is not None else {}

        config = Config(dotenv_filenames=dotenv_filenames if dotenv_filenames is not None else [".env"])

        env = os.environ.get("ENV", "").strip().lower()
        if env:
            log_extra["env"] = env

        init_log(
            name    = config.log.name,
            dir     = config.log.dir,
            level   = config.log.level,
            extra   = log_extra
        )

        return config

#-----------------------------------------------------------------------------

def global_config(*args, **kargs) -> Config | None:
    return _global_config

#-----------------------------------------------------------------------------

def safe_read_cfg(key: str, default: str = "") -> str:
    if not _global_config:
        return default

    return _global_config.get_str(key, default)

#-----------------------------------------------------------------------------
