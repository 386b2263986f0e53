from .config import (
    Config,
    OssConfig,

    global_config,
    safe_read_cfg
)

from .log import (
    init_log_console,
    init_log_file,

    init_log
)

from .op_ctx import (
    get_op_ctx,
    set_op_ctx,
    update_op_ctx
)
