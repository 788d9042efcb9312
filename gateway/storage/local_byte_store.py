"""Manages the staged bytes of local file records on disk."""

from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


def get_local_path(base_dir: PathLike, record_id: str) -> Path:
    """
    Get file path for a record's staged bytes.

    Args:
        base_dir: Directory holding staged files
        record_id: UUID of the local file record

    Returns:
        Path object for the staged file
    """
    return Path(base_dir) / record_id


def create_empty(path: PathLike) -> Path:
    """
    Create (or truncate) an empty staged file, creating parent directories.

    Raises:
        OSError: If the file cannot be created
    """
    filepath = Path(path)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_bytes(b"")
    return filepath


def append_bytes(path: PathLike, data: bytes) -> int:
    """
    Append data to the end of a staged file.

    Args:
        path: Staged file path
        data: Raw bytes, written in the order received

    Returns:
        Size of the file in bytes after the append

    Raises:
        OSError: If write operation fails
    """
    filepath = Path(path)
    with open(filepath, 'ab') as f:
        f.write(data)
    return filepath.stat().st_size


def read_bytes(path: PathLike) -> bytes:
    """
    Read a staged file entirely.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    return Path(path).read_bytes()


def exists(path: PathLike) -> bool:
    return Path(path).exists()


def delete(path: PathLike) -> bool:
    """
    Delete a staged file.

    Returns:
        True if file was deleted, False if it didn't exist

    Raises:
        OSError: If the file exists but cannot be removed
    """
    filepath = Path(path)
    if filepath.exists():
        filepath.unlink()
        return True
    return False
