"""Tests for lpkg.release.http."""

from __future__ import annotations

from pathlib import Path

from lpkg.core.result import Err, Ok
from lpkg.release.errors import DownloadError
from lpkg.release.http import HttpClient, MockHttpClient, RealHttpClient


def test_clients_satisfy_protocol() -> None:
    assert isinstance(RealHttpClient(), HttpClient)
    assert isinstance(MockHttpClient(), HttpClient)


class TestRealHttpClient:
    def test_download_local_url(self, tmp_path: Path) -> None:
        source = tmp_path / "debian-bookworm-amd64.tar.gz"
        source.write_bytes(b"payload")
        dest = tmp_path / "downloads" / source.name

        result = RealHttpClient().download(source.as_uri(), dest)

        assert result == Ok(dest)
        assert dest.read_bytes() == b"payload"
        assert not any(p.name.endswith(".part") for p in dest.parent.iterdir())

    def test_missing_resource(self, tmp_path: Path) -> None:
        url = (tmp_path / "missing.tar.gz").as_uri()

        result = RealHttpClient().download(url, tmp_path / "out.tar.gz")

        assert isinstance(result, Err)
        assert result.error.url == url
        assert not (tmp_path / "out.tar.gz").exists()


class TestMockHttpClient:
    def test_unknown_url_is_404(self, tmp_path: Path) -> None:
        client = MockHttpClient()

        result = client.download("https://example.com/a.tar.gz", tmp_path / "a.tar.gz")

        assert isinstance(result, Err)
        assert result.error.status == 404
        assert client.calls == ["https://example.com/a.tar.gz"]

    def test_configured_error(self, tmp_path: Path) -> None:
        client = MockHttpClient()
        error = DownloadError("https://example.com/a.tar.gz", 500, "Server Error")
        client.set_download("https://example.com/a.tar.gz", error)

        assert client.download("https://example.com/a.tar.gz", tmp_path / "a") == Err(error)
