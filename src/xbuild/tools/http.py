# tools/http.py
from __future__ import annotations

import asyncio
import os
import shutil
import tempfile
import urllib.error
import urllib.request
from pathlib import Path

from ..model import DownloadError

CHUNK_SIZE = 64 * 1024


def _fetch(url: str, destination: Path, timeout: float) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=destination.parent, prefix=destination.name, suffix=".part")
    try:
        with os.fdopen(fd, "wb") as out:
            try:
                with urllib.request.urlopen(url, timeout=timeout) as response:
                    status = getattr(response, "status", 200)
                    if not 200 <= status < 300:
                        raise DownloadError(url=url, status=status, reason=getattr(response, "reason", ""))
                    shutil.copyfileobj(response, out, CHUNK_SIZE)
            except urllib.error.HTTPError as e:
                raise DownloadError(url=url, status=e.code, reason=str(e.reason)) from e
        os.replace(tmp_name, destination)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


async def download(url: str, destination: str | Path, *, timeout: float = 300.0) -> Path:
    """
    GET `url` and stream the body into `destination`.

    The body lands in a temporary file next to `destination` and is moved into
    place only once complete.

    Raises:
      DownloadError: non-2xx response
      urllib.error.URLError: network failure
    """
    destination = Path(destination)
    await asyncio.to_thread(_fetch, url, destination, timeout)
    return destination
