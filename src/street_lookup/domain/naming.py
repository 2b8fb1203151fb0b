# domain/naming.py
import re

_NOT_LATIN_OR_SPACE = re.compile(r"[^a-zA-Z ]")


def clean_name(s: str) -> str:
    """
    Canonical lookup key for a display name: drop every character that is not a
    Latin letter or a space, then lowercase. Idempotent; "" -> "".
    """
    return _NOT_LATIN_OR_SPACE.sub("", s).lower()
