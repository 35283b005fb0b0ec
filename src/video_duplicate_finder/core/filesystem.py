"""Filesystem helpers for moving, trashing and deleting files."""

import logging
import os
from pathlib import Path

import psutil
from send2trash import send2trash

logger = logging.getLogger(__name__)

NETWORK_FILESYSTEMS = {
    "9p",
    "afpfs",
    "cifs",
    "davfs",
    "fuse.sshfs",
    "ncpfs",
    "nfs",
    "nfs4",
    "smb3",
    "smbfs",
    "sshfs",
    "webdav",
}


def _find_partition(path: Path):
    """Find the mounted partition with the longest mountpoint containing the path."""
    best = None
    best_length = -1
    for partition in psutil.disk_partitions(all=True):
        mountpoint = Path(partition.mountpoint)
        if (path == mountpoint or mountpoint in path.parents) and len(str(mountpoint)) > best_length:
            best = partition
            best_length = len(str(mountpoint))
    return best


def is_network_path(path: Path) -> bool:
    """
    Check if a path is on a network-mounted filesystem.

    UNC paths are always treated as network paths. Otherwise the mount
    containing the path is looked up and its filesystem type (or the
    "remote" drive option on Windows) decides.

    Args:
        path: Path to check

    Returns:
        True if the path is on a network share, False otherwise
    """
    path_str = str(path)
    if path_str.startswith("\\\\") or path_str.startswith("//"):
        return True

    try:
        partition = _find_partition(Path(os.path.abspath(path)))
    except (OSError, RuntimeError) as e:
        logger.warning(f"Could not list mounted filesystems for {path}: {e}")
        return False

    if partition is None:
        return False

    options = {option.strip() for option in partition.opts.split(",")}
    return partition.fstype.lower() in NETWORK_FILESYSTEMS or "remote" in options


def trash_file(path: Path) -> None:
    """Move a file to the OS trash."""
    send2trash(str(path))


def remove_file(path: Path) -> None:
    """Permanently delete a file."""
    os.remove(path)


def get_unique_path(directory: Path, filename: str, stem: str, extension: str) -> Path:
    """
    Get a path in the directory that does not collide with an existing file.

    Args:
        directory: Target directory
        filename: Preferred file name
        stem: File name without extension
        extension: Extension without the leading dot, may be empty

    Returns:
        directory/filename, or directory/"stem.N.extension" for the first free N
    """
    candidate = directory / filename
    counter = 1
    while candidate.exists():
        name = f"{stem}.{counter}.{extension}" if extension else f"{stem}.{counter}"
        candidate = directory / name
        counter += 1
    return candidate


def path_to_string_relative(path: Path) -> str:
    """Path relative to the current working directory, or the path itself if outside it."""
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)
