"""HTTP download client for pre-built package archives.

- HttpClient: protocol injected into the dispatcher
- RealHttpClient: urllib implementation (follows GitHub release redirects)
- MockHttpClient: canned responses for tests
"""

from __future__ import annotations

import shutil
import ssl
import urllib.error
import urllib.request
from pathlib import Path
from typing import Protocol, runtime_checkable

from lpkg import __version__
from lpkg.core.result import Err, Ok, Result
from lpkg.release.errors import DownloadError

__all__ = [
    "HttpClient",
    "MockHttpClient",
    "RealHttpClient",
]


@runtime_checkable
class HttpClient(Protocol):
    def download(self, url: str, dest: Path) -> Result[Path, DownloadError]:
        """Download url to dest, returning dest on success."""
        ...


class RealHttpClient:
    """HTTP client using urllib with system certificates."""

    def __init__(self, timeout: float = 60.0, user_agent: str = f"lpkg/{__version__}") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def download(self, url: str, dest: Path) -> Result[Path, DownloadError]:
        tmp = dest.with_name(f".{dest.name}.part")
        try:
            req = urllib.request.Request(url, headers={"User-Agent": self.user_agent})
            dest.parent.mkdir(parents=True, exist_ok=True)
            with urllib.request.urlopen(
                req, timeout=self.timeout, context=self._ssl_context
            ) as response:
                with open(tmp, "wb") as f:
                    shutil.copyfileobj(response, f, 1024 * 1024)
            tmp.replace(dest)
            return Ok(dest)
        except urllib.error.HTTPError as e:
            return Err(DownloadError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(DownloadError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(DownloadError(url=url, status=0, message="Download timed out"))
        except (ValueError, OSError) as e:
            return Err(DownloadError(url=url, status=0, message=str(e)))
        finally:
            tmp.unlink(missing_ok=True)


class MockHttpClient:
    """Mock HTTP client for tests.

    Usage:
        client = MockHttpClient()
        client.set_download("https://example.com/a.tar.gz", b"...")
    """

    def __init__(self) -> None:
        self._downloads: dict[str, bytes | DownloadError] = {}
        self.calls: list[str] = []

    def set_download(self, url: str, response: bytes | DownloadError) -> None:
        self._downloads[url] = response

    def download(self, url: str, dest: Path) -> Result[Path, DownloadError]:
        self.calls.append(url)

        if url not in self._downloads:
            return Err(DownloadError(url=url, status=404, message="Not Found (mock)"))

        response = self._downloads[url]
        if isinstance(response, DownloadError):
            return Err(response)

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(response)
        return Ok(dest)
