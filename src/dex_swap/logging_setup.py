import logging
import sys
import time
from pathlib import Path
from typing import Optional


def new_logger(level: int = logging.INFO, log_file: Optional[Path] = None) -> logging.Logger:
    log = logging.getLogger("dex_swap")
    log.setLevel(level)
    fmt = logging.Formatter(
        fmt="%(asctime)sZ %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )
    fmt.converter = time.gmtime  # UTC
    log.handlers.clear()
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for h in handlers:
        h.setFormatter(fmt)
        log.addHandler(h)
    return log
