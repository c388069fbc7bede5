import os
from pathlib import Path
from typing import List, Optional

from Dir_Digest.core.errors import EnumerationError
from Dir_Digest.core.logger import RunLogger
from Dir_Digest.core.models import FileSet


# ============================================================
# Ignore rules
# ============================================================

class IgnoreRules:
    def __init__(self, patterns: Optional[List[str]] = None):
        self.patterns = patterns or []

    def should_ignore(self, path: Path, root: Path) -> bool:
        if not self.patterns:
            return False

        name = path.name
        relative = path.relative_to(root)
        for pat in self.patterns:
            if name == pat or relative.match(pat):
                return True
        return False


# ============================================================
# Enumeration
# ============================================================

def enumerate_files(
    root: Path,
    *,
    follow_symlinks: bool = False,
    ignore: Optional[IgnoreRules] = None,
    logger: Optional[RunLogger] = None,
) -> FileSet:
    """
    Collect every regular file under `root` in canonical order.

    - Entries that cannot be read are skipped, never fatal
    - Symlinks are only followed when `follow_symlinks` is set
    - Result is sorted by the path's string form
    """
    logger = logger or RunLogger()
    root = Path(root)

    if not root.exists():
        raise EnumerationError(root, "path does not exist")
    if not root.is_dir():
        raise EnumerationError(root, "not a directory")

    files: List[Path] = []
    pending = [root]
    visited = set()

    while pending:
        directory = pending.pop()

        if follow_symlinks:
            # Symlinked directories can point back up the tree
            try:
                st = directory.stat()
            except OSError as e:
                logger.log("DEBUG", "scanner", f"Skipping {directory}: {e}")
                continue
            key = (st.st_dev, st.st_ino)
            if key in visited:
                logger.log("DEBUG", "scanner", f"Skipping already visited {directory}")
                continue
            visited.add(key)

        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            logger.log("DEBUG", "scanner", f"Skipping unreadable directory {directory}: {e}")
            continue

        for entry in entries:
            path = directory / entry.name

            if ignore and ignore.should_ignore(path, root):
                continue

            try:
                if entry.is_dir(follow_symlinks=follow_symlinks):
                    pending.append(path)
                elif entry.is_file(follow_symlinks=follow_symlinks):
                    files.append(path)
            except OSError as e:
                logger.log("DEBUG", "scanner", f"Skipping {path}: {e}")

    # 🔑 Canonical order: traversal order must never leak into the digest
    files.sort(key=str)

    return FileSet(root=root, paths=tuple(files))
