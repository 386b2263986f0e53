import base64, datetime, json, logging, os

from .op_ctx import get_op_ctx

#-----------------------------------------------------------------------------

# Storage operation fields copied from the current op context.
OP_CTX_FIELDS = ("op", "bucket", "key")

# Attributes every LogRecord carries; anything else came in through `extra=`.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}

#-----------------------------------------------------------------------------

class JsonEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, (datetime.datetime, datetime.date)):
            return o.isoformat()

        if isinstance(o, bytes):
            try:
                return o.decode()
            except UnicodeDecodeError:
                return base64.urlsafe_b64encode(o).decode()

        return str(o)

#-----------------------------------------------------------------------------

class JsonFormatter(logging.Formatter):
    """One JSON object per line, tagged with the storage operation in flight."""

    def __init__(self, extra: dict | None = None):
        super().__init__()

        self._extra = dict(extra) if extra else {}

    #-----------------------------------------------------

    def format(self, record: logging.LogRecord):
        entry = {
            "time"  : self.formatTime(record, self.datefmt),
            "level" : record.levelname,
            "msg"   : record.getMessage()
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack_info"] = record.stack_info

        entry.update(self._location(record))

        for k, v in record.__dict__.items():
            if k not in _RECORD_ATTRS:
                entry[k] = v

        entry.update(self._extra)

        for field in OP_CTX_FIELDS:
            value = get_op_ctx(field)
            if value:
                entry.setdefault(field, value)

        return json.dumps(entry, ensure_ascii=False, separators=(",", ":"), cls=JsonEncoder)


    @staticmethod
    def _location(record: logging.LogRecord) -> dict:
        location = {}

        if record.funcName and record.funcName != "<module>":
            location["function"] = record.funcName

        if record.pathname:
            filename = record.pathname.removeprefix(os.getcwd()).removeprefix(os.sep)
            location["file"] = f"{filename}:{record.lineno}"

        if record.module:
            location["module"] = record.module

        return location

#-----------------------------------------------------------------------------

def _install(handlers: list[logging.Handler], level: int, extra: dict | None):
    formatter = JsonFormatter(extra)
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.root.handlers = handlers
    logging.root.setLevel(level)


def init_log_console(level: int = logging.INFO, extra: dict | None = None):
    _install([logging.StreamHandler()], level, extra)


def init_log_file(name: str, dir: str, level: int = logging.INFO, extra: dict | None = None):
    """Log to a timestamped file under `dir` and to the console."""
    if dir:
        os.makedirs(dir, exist_ok=True)

    now = datetime.datetime.now()
    filename = os.path.join(dir, f"{now:%Y-%m-%d}_{name}_{now:%H%M%S_%f}.log")

    _install([logging.FileHandler(filename, mode="w+"), logging.StreamHandler()], level, extra)


def init_log(name: str = "", dir: str = "", level: int = logging.INFO, extra: dict | None = None):
    if name:
        init_log_file(name, dir, level, extra)
    else:
        init_log_console(level, extra)

#-----------------------------------------------------------------------------
