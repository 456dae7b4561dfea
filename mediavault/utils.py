# Filename: mediavault/utils.py
from .errors import InvalidFilename

_FORBIDDEN = ("..", "/", "\\")


def is_safe_filename(name: str) -> bool:
    return bool(name) and not any(token in name for token in _FORBIDDEN)


def ensure_safe_filename(name: str) -> str:
    if not is_safe_filename(name):
        raise InvalidFilename()
    return name
