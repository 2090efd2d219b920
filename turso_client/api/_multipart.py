"""
Streaming multipart/form-data bodies.

A database file can be far larger than we want to hold in memory, so the
body is produced by a background thread that writes into a bounded pipe,
while ``requests`` reads the other end as a chunked request body.
"""

import os
import logging
import threading
import uuid
from collections import deque
from typing import Optional, BinaryIO, Iterator, Deque

from ..exceptions import UploadStreamError

logger = logging.getLogger(__name__)

DEFAULT_PIPE_CAPACITY = 64 * 1024
DEFAULT_CHUNK_SIZE = 16 * 1024


class BoundedPipe:
    """
    In-memory pipe with a byte capacity.

    ``write`` blocks while the pipe is full, ``read`` blocks while it is
    empty. The writer ends the stream with ``close()``, optionally passing
    the error that stopped it; the reader then gets that error instead of
    EOF. The reader can give up with ``close_reader()``, after which writes
    fail with ``BrokenPipeError``.
    """

    def __init__(self, capacity: int = DEFAULT_PIPE_CAPACITY):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._cond = threading.Condition()
        self._chunks: Deque[bytes] = deque()
        self._size = 0
        self._closed = False
        self._error: Optional[BaseException] = None
        self._reader_closed = False

    def write(self, data: bytes) -> int:
        """Write all of ``data``, blocking until the reader makes room."""
        view = memoryview(data)
        written = 0
        with self._cond:
            while written < len(view):
                while self._size >= self.capacity and not self._reader_closed:
                    self._cond.wait()
                if self._reader_closed:
                    raise BrokenPipeError("pipe reader closed")
                if self._closed:
                    raise ValueError("write to closed pipe")
                room = self.capacity - self._size
                chunk = bytes(view[written:written + room])
                self._chunks.append(chunk)
                self._size += len(chunk)
                written += len(chunk)
                self._cond.notify_all()
        return written

    def close(self, error: Optional[BaseException] = None) -> None:
        """End the stream, successfully or with ``error``. Only the first call counts."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._error = error
            self._cond.notify_all()

    def close_reader(self) -> None:
        """Stop reading; blocked and future writes fail."""
        with self._cond:
            self._reader_closed = True
            self._chunks.clear()
            self._size = 0
            self._cond.notify_all()

    def read(self) -> bytes:
        """
        Read the next chunk.

        Returns b"" at the end of a successful stream.

        Raises:
            UploadStreamError: If the writer closed the pipe with an error
        """
        with self._cond:
            while not self._chunks and not self._closed:
                self._cond.wait()
            if self._chunks:
                chunk = self._chunks.popleft()
                self._size -= len(chunk)
                self._cond.notify_all()
                return chunk
            if self._error is not None:
                raise UploadStreamError(
                    f"upload stream failed: {self._error}",
                    cause=self._error,
                ) from self._error
            return b""

    def __iter__(self) -> Iterator[bytes]:
        while True:
            chunk = self.read()
            if not chunk:
                return
            yield chunk


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


class MultipartStream:
    """
    A single-file multipart/form-data body produced on a background thread.

    Usage:
        with MultipartStream(fileobj) as stream:
            session.post(url, data=iter(stream),
                         headers={"Content-Type": stream.content_type})
    """

    def __init__(
        self,
        source: BinaryIO,
        field_name: str = "file",
        filename: Optional[str] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        capacity: int = DEFAULT_PIPE_CAPACITY,
    ):
        self.source = source
        self.field_name = field_name
        if filename is None:
            filename = os.path.basename(str(getattr(source, "name", "") or "file"))
        self.filename = filename
        self.chunk_size = chunk_size
        self.boundary = uuid.uuid4().hex
        self.pipe = BoundedPipe(capacity)
        self._thread: Optional[threading.Thread] = None

    @property
    def content_type(self) -> str:
        return f"multipart/form-data; boundary={self.boundary}"

    def preamble(self) -> bytes:
        return (
            f"--{self.boundary}\r\n"
            f'Content-Disposition: form-data; name="{_quote(self.field_name)}"; '
            f'filename="{_quote(self.filename)}"\r\n'
            "Content-Type: application/octet-stream\r\n"
            "\r\n"
        ).encode("utf-8")

    def epilogue(self) -> bytes:
        return f"\r\n--{self.boundary}--\r\n".encode("ascii")

    def _produce(self) -> None:
        try:
            self.pipe.write(self.preamble())
            while True:
                chunk = self.source.read(self.chunk_size)
                if not chunk:
                    break
                self.pipe.write(chunk)
            self.pipe.write(self.epilogue())
        except Exception as e:
            logger.debug("Multipart producer for %s stopped: %s", self.filename, e)
            self.pipe.close(e)
            return
        self.pipe.close()

    def start(self) -> "MultipartStream":
        """Start the producer thread."""
        if self._thread is None:
            self._thread = threading.Thread(
                target=self._produce,
                name=f"turso-upload-{self.boundary[:8]}",
                daemon=True,
            )
            self._thread.start()
        return self

    def close(self) -> None:
        """Stop reading and wait for the producer to finish."""
        self.pipe.close_reader()
        if self._thread is not None:
            self._thread.join()

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.pipe)

    def __enter__(self) -> "MultipartStream":
        return self.start()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
