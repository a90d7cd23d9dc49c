"""Makes sure a nested directory path exists on the share.

    Probing starts at the full path and walks up one level at a time until an existing
    directory is found, since repeated writes usually land in a tree that mostly exists
    already. Only the missing levels below that directory are then created, from the
    shallowest to the deepest. Probes and creates are strictly sequential.

    Empty segments (e.g. from a doubled slash) are kept as-is.
"""
import typing as t

import zrlog

from sharestore.util import HaltFlag
from .errors import is_not_found

CURRENT_DIR = "."


def _join(root: str, sub_path: str) -> str:
    if not root:
        return sub_path
    return f"{root}/{sub_path}"


def make_dirs(remote,
              path: str,
              root: str = "",
              halt_flag: t.Optional[HaltFlag] = None,
              metadata: t.Optional[dict[str, str]] = None):
    """Create every missing directory of ``path`` below ``root``.

        ``remote`` must provide ``get_directory_properties(path)`` and
        ``create_directory(path, metadata)`` raising classified errors. A failed probe
        other than a missing directory, or any failed create, is raised immediately.
        Directories created before a failure or a halt are left in place.
    """
    if path == CURRENT_DIR:
        return
    log = zrlog.get_logger("sharestore.reconcile")
    sub_dirs = path.split("/")
    i = len(sub_dirs)
    existing_dir = ""
    while i > 0:
        existing_dir = "/".join(sub_dirs[0:i])
        if halt_flag is not None:
            halt_flag.check_continue(True)
        try:
            remote.get_directory_properties(_join(root, existing_dir))
            break
        except Exception as ex:
            if not is_not_found(ex):
                raise
            i -= 1
            existing_dir = ""
    log.debug(f"Deepest existing directory for [{path}] under [{root}]: [{existing_dir}]")
    current_dir = existing_dir
    for sub_dir in sub_dirs[i:]:
        if current_dir == "":
            current_dir = sub_dir
        else:
            current_dir += "/" + sub_dir
        if halt_flag is not None:
            halt_flag.check_continue(True)
        remote.create_directory(_join(root, current_dir), metadata)
        log.debug(f"Created directory [{current_dir}] under [{root}]")
