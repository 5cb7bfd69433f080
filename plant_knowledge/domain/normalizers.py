import re
from typing import Any, Union

_WHITESPACE_RE = re.compile(r"\s+")
_APOSTROPHE_RE = re.compile(r"[‘’]")


def canon_key(value: Any) -> str:
    # lowercase, trimmed, inner whitespace collapsed to one space
    text = str(value if value is not None else "").strip().lower()
    return _WHITESPACE_RE.sub(" ", text)


def normalize_plant_name(name: Any) -> str:
    return _APOSTROPHE_RE.sub("'", canon_key(name))


def normalize_search_key(query: Any) -> str:
    return canon_key(query)


def make_species_key(id_or_slug: Union[int, str]) -> str:
    return str(id_or_slug).strip().lower()


def make_registry_key(key: Any) -> str:
    return str(key if key is not None else "").strip().lower()
