import logging

#-----------------------------------------------------------------------------

class LogConfig:
    """Where logs go: a file under `dir` when `name` is set, else the console."""

    def __init__(
        self,
        name    : str = "",
        dir     : str = "",
        level   : int = logging.INFO
    ):
        self.name   = name.strip() if name else ""
        self.dir    = dir.strip() if dir else ""
        self.level  = level


    def print(self):
        target = f"{self.dir or '.'}/{self.name}" if self.name else "console"
        print(f"log             : {target} ({logging.getLevelName(self.level)})")

#-----------------------------------------------------------------------------
