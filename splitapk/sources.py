"""
Listing and extracting the apks of an archive (``.apks``, ``.apkm``, ``.xapk``, ``.zip``) or a folder.
"""
import logging
import os
import shutil
from typing import Iterable, List, Tuple, Union
from zipfile import BadZipFile, ZipFile

from splitapk.canonical import APK_EXTENSION
from splitapk.classifier import enrich_entries
from splitapk.models import PackageEntry

logger = logging.getLogger(__name__)

PathType = Union[str, os.PathLike]


def is_apk_name(name: str) -> bool:
    """Check if the file name has the ``.apk`` extension (any case)."""
    return name.lower().endswith(APK_EXTENSION)


def _open_archive(path: str) -> ZipFile:
    try:
        return ZipFile(path)
    except FileNotFoundError:
        raise
    except (BadZipFile, OSError) as e:
        raise FileExistsError(f'Invalid file: {path}') from e


def scan_archive(path: PathType) -> List[Tuple[str, int]]:
    """
    List the apks of an archive.

    Args:
        path: Path to the archive (e.g. '/path/to/app.apks').
    Returns:
        ``(name, size)`` pairs, the name without the directories of the entry.
    Raises:
        FileNotFoundError: If the file does not exist.
        FileExistsError: If the file is not a valid zip archive.
    """
    path = os.fspath(path)
    with _open_archive(path) as zf:
        apks = [(os.path.basename(info.filename), max(info.file_size, 0))
                for info in zf.infolist() if not info.is_dir() and is_apk_name(info.filename)]
    logger.debug('Found %d apks in %s', len(apks), path)
    return apks


def scan_folder(path: PathType) -> List[Tuple[str, int]]:
    """
    List the apks of a folder (not recursive).

    Args:
        path: Path to the folder.
    Returns:
        ``(name, size)`` pairs.
    Raises:
        FileNotFoundError: If the folder does not exist.
    """
    path = os.fspath(path)
    if not os.path.isdir(path):
        raise FileNotFoundError(f'No such directory: {path}')
    with os.scandir(path) as it:
        apks = [(entry.name, entry.stat().st_size) for entry in it if entry.is_file() and is_apk_name(entry.name)]
    logger.debug('Found %d apks in %s', len(apks), path)
    return apks


def read_entries(path: PathType) -> List[PackageEntry]:
    """
    List and classify the apks of an archive or a folder.

    >>> entries = read_entries('/path/to/app.apks')
    >>> entries[0].is_base
    True

    Args:
        path: Path to an archive or a folder.
    Returns:
        The classified entries, base first (see :func:`splitapk.classifier.enrich_entries`).
    Raises:
        FileNotFoundError: If the path does not exist.
        FileExistsError: If the path is a file but not a valid zip archive.
    """
    path = os.fspath(path)
    if os.path.isdir(path):
        return enrich_entries(scan_folder(path))
    if not os.path.isfile(path):
        raise FileNotFoundError(f'No such file or directory: {path}')
    return enrich_entries(scan_archive(path))


def extract_entries(path: PathType, names: Iterable[str], output_dir: PathType) -> List[str]:
    """
    Copy apks out of an archive or a folder.

    Args:
        path: Path to the archive or the folder the apks were listed from.
        names: The file names to copy (e.g. ``[e.name for e in selection]``).
        output_dir: Directory to copy the apks to (created if missing).
    Returns:
        The paths of the copied files.
    Raises:
        FileNotFoundError: If the source does not exist or one of the names is not in it.
        FileExistsError: If the source is a file but not a valid zip archive.
    """
    path, output_dir = os.fspath(path), os.fspath(output_dir)
    wanted = list(dict.fromkeys(names))
    os.makedirs(output_dir, exist_ok=True)
    written = []

    if os.path.isdir(path):
        for name in wanted:
            src = os.path.join(path, name)
            if not os.path.isfile(src):
                raise FileNotFoundError(f"'{name}' not found in {path}")
            written.append(shutil.copyfile(src, os.path.join(output_dir, name)))
    elif os.path.isfile(path):
        with _open_archive(path) as zf:
            members = {}
            for info in zf.infolist():
                if not info.is_dir() and is_apk_name(info.filename):
                    members.setdefault(os.path.basename(info.filename), info)
            missing = [name for name in wanted if name not in members]
            if missing:
                raise FileNotFoundError(f"{', '.join(missing)} not found in {path}")
            for name in wanted:
                dst = os.path.join(output_dir, name)
                with zf.open(members[name]) as src, open(dst, 'wb') as out:
                    shutil.copyfileobj(src, out)
                written.append(dst)
    else:
        raise FileNotFoundError(f'No such file or directory: {path}')

    logger.debug('Extracted %d apks from %s to %s', len(written), path, output_dir)
    return written


def format_file_size(size: int) -> str:
    """
    Format a size in bytes.

    >>> format_file_size(1536)
    '1.50 KB'
    """
    if size < 1024:
        return f'{size} B'
    kb = size / 1024
    if kb < 1024:
        return f'{kb:.2f} KB'
    mb = kb / 1024
    if mb < 1024:
        return f'{mb:.2f} MB'
    return f'{mb / 1024:.2f} GB'
