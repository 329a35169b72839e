# common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions: directories, archive extraction and transient
download paths.
"""

import logging
import uuid
import zipfile
from pathlib import Path
from typing import List, Optional, Union

module_logger = logging.getLogger(__name__)


def ensure_directory(
    path: Union[str, Path], current_logger: Optional[logging.Logger] = None
) -> Path:
    """Create a directory (and parents) if it does not exist."""
    logger_to_use = current_logger if current_logger else module_logger
    directory = Path(path)
    if not directory.is_dir():
        directory.mkdir(parents=True, exist_ok=True)
        logger_to_use.info(f"Created directory: {directory}")
    return directory


def make_transient_path(download_dir: Union[str, Path], file_name: str) -> Path:
    """
    Returns a unique path inside download_dir that keeps file_name's
    extension, so installers that dispatch on the extension still work.
    """
    name = Path(file_name)
    return Path(download_dir) / f"{name.stem}-{uuid.uuid4().hex[:8]}{name.suffix}"


def extract_archive(
    archive_path: Union[str, Path],
    extract_to_dir: Union[str, Path],
    current_logger: Optional[logging.Logger] = None,
) -> List[str]:
    """
    Extract a zip archive fully into a directory, overwriting existing files.

    Members that would resolve outside extract_to_dir are rejected.

    Args:
        archive_path: The path to the zip file.
        extract_to_dir: The directory to extract into. Created if missing.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        The member names that were extracted.

    Raises:
        FileNotFoundError: archive_path is not a file.
        zipfile.BadZipFile: The archive is corrupt or not a zip file.
        ValueError: A member path escapes the destination directory.
    """
    logger_to_use = current_logger if current_logger else module_logger
    zip_path = Path(archive_path)
    extract_path = ensure_directory(extract_to_dir, logger_to_use)

    if not zip_path.is_file():
        raise FileNotFoundError(f"Archive not found: {zip_path}")

    logger_to_use.info(f"Extracting '{zip_path}' to '{extract_path}'")
    destination_root = extract_path.resolve()
    with zipfile.ZipFile(zip_path, "r") as zip_ref:
        members = zip_ref.namelist()
        for member in members:
            target = (destination_root / member).resolve()
            if target != destination_root and destination_root not in target.parents:
                raise ValueError(
                    f"Archive member '{member}' would extract outside {destination_root}"
                )
        zip_ref.extractall(extract_path)

    logger_to_use.info(f"Extracted {len(members)} entries to {extract_path}")
    logger_to_use.debug(f"Extracted entries: {members}")
    return members


def cleanup_temp_file(
    file_path: Optional[Union[str, Path]],
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Remove a transient file if it exists. Failures are logged, not raised.
    """
    logger_to_use = current_logger if current_logger else module_logger
    if not file_path:
        return
    path_to_remove = Path(file_path)
    try:
        if path_to_remove.is_file():
            path_to_remove.unlink()
            logger_to_use.debug(f"Cleaned up temporary file: {path_to_remove}")
        elif path_to_remove.exists():
            logger_to_use.warning(
                f"Path '{path_to_remove}' exists but is not a file. Not removed."
            )
    except OSError as e:
        logger_to_use.warning(f"Could not remove temporary file '{path_to_remove}': {e}")
