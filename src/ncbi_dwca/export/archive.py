"""Package an export directory into a zip archive."""

from __future__ import annotations

import logging
import zipfile
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def zip_directory(directory: Path | str, target: Path | str, exclude: Iterable[str] = ()) -> Path:
    """Zip every file below ``directory`` into ``target``.

    Members are stored with paths relative to ``directory`` and added in
    sorted order. Files whose name is in ``exclude`` are skipped, and so is
    ``target`` itself.

    Args:
        directory: Directory to package
        target: Zip file to create; must not exist yet
        exclude: File names to leave out

    Returns:
        Path to the created archive

    Raises:
        FileExistsError: If ``target`` already exists
    """
    directory = Path(directory)
    target = Path(target)
    excluded = set(exclude) | {target.name}

    files = sorted(
        path for path in directory.rglob("*") if path.is_file() and path.name not in excluded
    )

    logger.info(f"Packing ZIP archive at {target}")
    with zipfile.ZipFile(target, "x", compression=zipfile.ZIP_DEFLATED) as archive:
        for path in files:
            arcname = path.relative_to(directory).as_posix()
            archive.write(path, arcname)
            logger.debug(f"  added {arcname}")

    logger.info(f"Packed {len(files)} files into {target}")
    return target
