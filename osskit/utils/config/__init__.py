from .config import (
    Config,

    global_config,
    safe_read_cfg
)

from .log import LogConfig
from .oss import OssConfig
