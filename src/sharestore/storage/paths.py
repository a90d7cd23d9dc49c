"""Conversions between caller paths and paths on the file share.

    The three conversions are intentionally kept separate. ``abs_path`` is applied to
    paths given by callers (which may or may not already include the work directory),
    ``rel_path`` to names returned by listings and ``relative_path`` to paths taken
    from directory or file URLs. Each removes at most one leading slash.
"""


def _strip_slash(path: str) -> str:
    return path[1:] if path.startswith("/") else path


def _strip_prefix(path: str, prefix: str) -> str:
    return path[len(prefix):] if path.startswith(prefix) else path


def abs_path(work_dir: str, path: str) -> str:
    """Get the path on the share for a caller path.

        A path that already starts with the work directory keeps it (less the leading
        slash). Otherwise the work directory is put in front of the path as-is, with no
        separator added.
    """
    if path.startswith(work_dir):
        return _strip_slash(path)
    return _strip_slash(work_dir) + path


def rel_path(work_dir: str, path: str) -> str:
    """Get the caller path for a path on the share."""
    return _strip_prefix(path, _strip_slash(work_dir))


def relative_path(work_dir: str, path: str) -> str:
    """Get the file or directory name below the work directory for a URL path."""
    if path.startswith(work_dir):
        return _strip_slash(_strip_prefix(path, work_dir))
    return path


def parent_dir(path: str) -> str:
    """Get the parent directory of a caller path, or '.' if there is none."""
    path = path.rstrip("/")
    if "/" not in path:
        return "."
    parent = path[:path.rfind("/")]
    return parent if parent else "."
