import logging
from typing import Optional, Union


def configure_logging(level: Union[int, str] = logging.WARNING, fmt: Optional[str] = None) -> None:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level}")
        level = resolved
    if fmt is None:
        fmt = '%(levelname)s:%(name)s:%(message)s'
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)
    root.setLevel(level)
