# common/network_utils.py
# -*- coding: utf-8 -*-
"""
Network-related utility functions.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import requests

from provisioner.errors import NetworkError

module_logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def download_file(
    url: str,
    download_to_path: Union[str, Path],
    timeout: float,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Download a file from a given URL to a specified path.

    Redirects are followed. A partially written file is removed when the
    download fails.

    Args:
        url: The URL of the file.
        download_to_path: Where the downloaded file is saved. Parent
                          directories are created as needed.
        timeout: Connect and read timeout in seconds.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        The path of the downloaded file.

    Raises:
        NetworkError: On any transport, HTTP or file I/O failure.
    """
    logger_to_use = current_logger if current_logger else module_logger
    download_path = Path(download_to_path)
    logger_to_use.info(f"Downloading {url} to {download_path}")
    response: Optional[requests.Response] = None

    try:
        download_path.parent.mkdir(parents=True, exist_ok=True)
        response = requests.get(url, stream=True, timeout=timeout)
        response.raise_for_status()

        with open(download_path, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    f.write(chunk)
        logger_to_use.info(f"Downloaded {url} ({download_path.stat().st_size} bytes)")
        return download_path
    except requests.exceptions.HTTPError as http_err:
        status_code = response.status_code if response is not None else "Unknown"
        error = NetworkError(url, f"HTTP error {status_code}: {http_err}")
    except requests.exceptions.ConnectionError as conn_err:
        error = NetworkError(url, f"connection error: {conn_err}")
    except requests.exceptions.Timeout as timeout_err:
        error = NetworkError(url, f"timed out after {timeout}s: {timeout_err}")
    except requests.exceptions.RequestException as req_err:
        error = NetworkError(url, f"request failed: {req_err}")
    except OSError as io_err:
        error = NetworkError(url, f"could not write {download_path}: {io_err}")
    finally:
        if response is not None:
            response.close()

    logger_to_use.error(str(error))
    if download_path.is_file():
        download_path.unlink()
    raise error
