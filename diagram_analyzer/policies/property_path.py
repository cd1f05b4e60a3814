"""
Dot-path access into nested resource dictionaries.

Policies address resource values as ``"properties.siteConfig.minTlsVersion"``.
Lookups never raise for missing keys; writers create intermediate mappings
as needed. Every writer is idempotent.
"""

from typing import Any, Dict, List, MutableMapping, Optional

PATH_SEPARATOR = "."


def split_path(path: str) -> List[str]:
    return path.split(PATH_SEPARATOR)


def get_property(tree: Any, path: str) -> Optional[Any]:
    """Resolve ``path`` in ``tree``; None when any segment is absent."""
    current = tree
    for part in split_path(path):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current


def _walk_creating(tree: MutableMapping[str, Any], parts: List[str]) -> Dict[str, Any]:
    current = tree
    for part in parts:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    return current  # type: ignore[return-value]


def set_property(tree: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Create or overwrite the leaf at ``path``."""
    parts = split_path(path)
    parent = _walk_creating(tree, parts[:-1])
    parent[parts[-1]] = value


def add_property(tree: MutableMapping[str, Any], path: str, value: Any) -> None:
    """
    Add ``value`` at ``path``.

    A list leaf gains ``value`` unless it already holds it, a dict leaf is
    updated from a dict ``value``, and any other leaf is replaced.
    """
    parts = split_path(path)
    parent = _walk_creating(tree, parts[:-1])
    leaf = parts[-1]
    existing = parent.get(leaf)
    if isinstance(existing, list):
        if value not in existing:
            existing.append(value)
    elif isinstance(existing, dict) and isinstance(value, dict):
        existing.update(value)
    else:
        parent[leaf] = value


def remove_property(tree: MutableMapping[str, Any], path: str) -> None:
    """Delete the leaf at ``path``; no-op when its parent does not exist."""
    parts = split_path(path)
    current: Any = tree
    for part in parts[:-1]:
        if not isinstance(current, dict) or part not in current:
            return
        current = current[part]
    if isinstance(current, dict):
        current.pop(parts[-1], None)
