from ...exceptions import ConfigError

#-----------------------------------------------------------------------------

DEFAULT_SIGN_TIMEOUT    = 3600
DEFAULT_CONNECT_TIMEOUT = 60

#-----------------------------------------------------------------------------

class OssConfig:
    """
    Aliyun OSS connection settings.

    Args:
        access_key_id: AccessKey ID
        access_key_secret: AccessKey secret
        endpoint: Region endpoint host, e.g. oss-cn-hangzhou.aliyuncs.com
        bucket: Bucket name
        timeout: Lifetime of signed URLs in seconds
        is_private: Whether the bucket is private. Advisory only.
        connect_timeout: Connect timeout handed to the OSS client, in seconds
    """

    # Validation order matters: the first missing one is reported.
    REQUIRED_FIELDS = ("access_key_id", "access_key_secret", "endpoint", "bucket")

    def __init__(
        self,
        access_key_id       : str = "",
        access_key_secret   : str = "",
        endpoint            : str = "",
        bucket              : str = "",
        timeout             : int = DEFAULT_SIGN_TIMEOUT,
        is_private          : bool = False,
        connect_timeout     : int = DEFAULT_CONNECT_TIMEOUT
    ):
        self.access_key_id      = access_key_id.strip() if access_key_id else ""
        self.access_key_secret  = access_key_secret.strip() if access_key_secret else ""
        self.endpoint           = endpoint.strip() if endpoint else ""
        self.bucket             = bucket.strip() if bucket else ""

        self.timeout            = timeout if timeout and timeout > 0 else DEFAULT_SIGN_TIMEOUT
        self.is_private         = bool(is_private)
        self.connect_timeout    = connect_timeout if connect_timeout and connect_timeout > 0 else DEFAULT_CONNECT_TIMEOUT


    def validate(self):
        for field in self.REQUIRED_FIELDS:
            if not getattr(self, field):
                raise ConfigError(field)


    def print(self):
        from .config import Config
        print(f"oss             : {self.bucket}@{self.endpoint} ({Config.to_masked_str(self.access_key_id)})")

#-----------------------------------------------------------------------------
