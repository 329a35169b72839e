from unittest.mock import MagicMock

import pytest
import requests

from common.network_utils import download_file
from provisioner.errors import NetworkError


def _response(chunks=(b"abc", b"def"), status_error=None):
    response = MagicMock()
    response.status_code = 500 if status_error else 200
    response.iter_content.return_value = list(chunks)
    if status_error:
        response.raise_for_status.side_effect = status_error
    return response


def test_download_file_writes_chunks(mocker, tmp_path):
    get_mock = mocker.patch(
        "common.network_utils.requests.get", return_value=_response()
    )
    target = tmp_path / "nested" / "file.bin"

    result = download_file("https://example.com/file.bin", target, timeout=7)

    assert result == target
    assert target.read_bytes() == b"abcdef"
    get_mock.assert_called_once_with(
        "https://example.com/file.bin", stream=True, timeout=7
    )


def test_download_file_http_error_raises_network_error(mocker, tmp_path):
    mocker.patch(
        "common.network_utils.requests.get",
        return_value=_response(status_error=requests.exceptions.HTTPError("500")),
    )

    with pytest.raises(NetworkError) as exc_info:
        download_file("https://example.com/x", tmp_path / "x", timeout=7)

    assert exc_info.value.url == "https://example.com/x"
    assert "HTTP error 500" in str(exc_info.value)


@pytest.mark.parametrize(
    "error",
    [
        requests.exceptions.ConnectionError("refused"),
        requests.exceptions.Timeout("slow"),
        requests.exceptions.RequestException("other"),
    ],
)
def test_download_file_transport_errors_raise_network_error(mocker, tmp_path, error):
    mocker.patch("common.network_utils.requests.get", side_effect=error)

    with pytest.raises(NetworkError):
        download_file("https://example.com/x", tmp_path / "x", timeout=7)


def test_download_file_removes_partial_file(mocker, tmp_path):
    response = _response()
    response.iter_content.side_effect = requests.exceptions.ConnectionError("reset")
    mocker.patch("common.network_utils.requests.get", return_value=response)
    target = tmp_path / "partial.bin"

    with pytest.raises(NetworkError):
        download_file("https://example.com/partial.bin", target, timeout=7)

    assert not target.exists()
    response.close.assert_called_once()
