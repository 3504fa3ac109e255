"""Download a named archive to a local file.

Handles http(s) URLs and the ``file://`` pseudo-scheme, which is served
by a local transport mounted on the httpx client so that offline indexes
and tests go through the same code path as real downloads.
"""

import logging
import os
from urllib.parse import urlsplit
from urllib.request import url2pathname

import httpx

from stackinit.errors import FilesystemError, RemoteStatusError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = httpx.Timeout(10.0, read=300.0)
CHUNK_SIZE = 64 * 1024


class _FileByteStream(httpx.SyncByteStream):
    def __init__(self, fileobj):
        self._fileobj = fileobj

    def __iter__(self):
        while chunk := self._fileobj.read(CHUNK_SIZE):
            yield chunk

    def close(self):
        self._fileobj.close()


class LocalFileTransport(httpx.BaseTransport):
    """Serve ``file://`` URLs from the local filesystem."""

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        path = url2pathname(request.url.path)
        if not os.path.isfile(path):
            return httpx.Response(404, request=request)
        try:
            fileobj = open(path, "rb")
        except OSError:
            return httpx.Response(403, request=request)
        return httpx.Response(
            200,
            headers={"Content-Length": str(os.path.getsize(path))},
            stream=_FileByteStream(fileobj),
            request=request,
        )


def build_client(timeout=DEFAULT_TIMEOUT) -> httpx.Client:
    """Create an httpx client that also understands ``file://`` URLs."""
    return httpx.Client(
        follow_redirects=True,
        timeout=timeout,
        mounts={"file://": LocalFileTransport()},
    )


def build_request(client: httpx.Client, url: str) -> httpx.Request:
    """Build a GET for *url* that keeps its scheme.

    ``file:///path`` has no host, so ``Client.build_request`` would merge it
    into the base URL as a relative path and drop the scheme. Such requests
    are built directly; the client still routes them to its ``file://`` mount.
    """
    if urlsplit(url).scheme == "file":
        return httpx.Request("GET", url)
    return client.build_request("GET", url)


def fetch(url: str, destination_file, client: httpx.Client | None = None):
    """Stream the body at *url* into *destination_file*.

    Raises TransportError if the request cannot be made, RemoteStatusError
    for any non-200 answer and FilesystemError if the file cannot be written.
    There are no retries.
    """
    logger.debug("Fetching %s to %s", url, destination_file)
    try:
        out = open(destination_file, "wb")
    except OSError as e:
        raise FilesystemError(f"Cannot create {destination_file}: {e}") from e

    owns_client = client is None
    if owns_client:
        client = build_client()
    try:
        with out:
            _stream_to_file(client, url, out)
    finally:
        if owns_client:
            client.close()


def _stream_to_file(client, url, out):
    try:
        response = client.send(build_request(client, url), stream=True)
        try:
            if response.status_code != 200:
                raise RemoteStatusError(url, response.status_code, response.reason_phrase)
            for chunk in response.iter_bytes():
                try:
                    out.write(chunk)
                except OSError as e:
                    raise FilesystemError(f"Cannot write {out.name}: {e}") from e
        finally:
            response.close()
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise TransportError(f"Failed to fetch {url}: {e}") from e
