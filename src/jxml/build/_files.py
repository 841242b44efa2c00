"""File discovery and IO for the build pipeline.

All helpers are async and go through :class:`anyio.Path`, so fragment tasks
never block the event loop on disk access.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import anyio

from jxml.exceptions import MissingSourceFileError, WriteFailureError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from structlog.typing import FilteringBoundLogger


async def find_files(directory: Path, suffix: str) -> list[Path]:
    """List files in ``directory`` whose name ends with ``suffix``.

    Subdirectories are not searched.

    Returns:
        Fully qualified paths in lexicographic order.

    Raises:
        MissingSourceFileError: If ``directory`` does not exist or is not a
            directory.
    """
    root = anyio.Path(directory)
    if not await root.is_dir():
        msg = f"Directory not found: {directory}"
        raise MissingSourceFileError(msg, path=directory)

    found = [
        Path(await entry.absolute())
        async for entry in root.iterdir()
        if entry.name.endswith(suffix) and await entry.is_file()
    ]
    return sorted(found)


async def read_text(path: Path) -> str:
    """Read a UTF-8 text file.

    Raises:
        MissingSourceFileError: If the file cannot be read.
    """
    try:
        return await anyio.Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Unable to read {path}: {e}"
        raise MissingSourceFileError(msg, path=path) from e


async def write_text(path: Path, text: str) -> int:
    """Write ``text`` to ``path`` as UTF-8, replacing any existing file.

    Returns:
        Number of bytes written.

    Raises:
        WriteFailureError: If the file cannot be written.
    """
    data = text.encode("utf-8")
    try:
        await anyio.Path(path).write_bytes(data)
    except OSError as e:
        msg = f"Unable to write {path}: {e}"
        raise WriteFailureError(msg, path=path) from e
    return len(data)


async def delete_files(
    paths: Iterable[Path],
    logger: FilteringBoundLogger,
) -> int:
    """Delete each of ``paths``, logging any file that cannot be removed.

    Returns:
        Number of files deleted.
    """
    deleted = 0
    for path in paths:
        try:
            await anyio.Path(path).unlink()
        except OSError as e:
            logger.warning("trash_delete_failed", path=str(path), error=str(e))
        else:
            logger.debug("trash_deleted", path=str(path))
            deleted += 1
    return deleted
