"""Filesystem scratch area shared by all requests.

Holds uploads that have not been promoted to the blob store yet and
short-lived copies pulled down from it for analysis. The directory is
never locked; unique file names are what keeps concurrent calls apart.
"""

import re
import uuid
from collections.abc import Generator, Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO

from app.logging.logger import Log
from app.storage.exceptions import StagingReadError, StagingSizeLimitError, StagingWriteError

CHUNK_SIZE = 64 * 1024

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_file_name(name: str, default: str = "document") -> str:
    """Reduce a user-supplied file name to a single safe path component."""
    base = Path(name.replace("\\", "/")).name
    cleaned = _UNSAFE_CHARS.sub("_", base).strip("._")
    return cleaned[:120] or default


class LocalStagingStore:
    """Reads, writes and cleans up files under one staging directory."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def generate_upload_name(self, original_name: str) -> str:
        """``<base>-<token><ext>``, unique per call."""
        safe = safe_file_name(original_name)
        path = Path(safe)
        return f"{path.stem}-{uuid.uuid4().hex[:12]}{path.suffix}"

    def generate_temp_name(self, document_id: str, original_name: str) -> str:
        """Temp copy name scoped to one document and one call."""
        token = uuid.uuid4().hex[:12]
        return f"analysis-{safe_file_name(document_id)}-{token}-{safe_file_name(original_name)}"

    def write_stream(
        self,
        stream: BinaryIO,
        original_name: str,
        max_bytes: int | None = None,
    ) -> Path:
        """Copy *stream* into a freshly named staging file.

        Raises:
            StagingSizeLimitError: if more than *max_bytes* arrive; the
                partial file is removed first.
            StagingWriteError: on any filesystem failure; the partial file
                is removed first.
        """
        path = self._root / self.generate_upload_name(original_name)
        chunks = iter(lambda: stream.read(CHUNK_SIZE), b"")
        self._write(path, chunks, max_bytes)
        return path

    def write_chunks(self, path: Path, chunks: Iterable[bytes]) -> int:
        """Write an iterable of chunks to *path* and return the byte count."""
        return self._write(path, chunks, None)

    def read_bytes(self, path: Path | str) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as exc:
            raise StagingReadError(f"Cannot read staged file {path}: {exc}") from exc

    def iter_chunks(self, path: Path | str) -> Iterator[bytes]:
        """Stream a staged file lazily; the handle closes when exhausted."""
        try:
            handle = Path(path).open("rb")
        except OSError as exc:
            raise StagingReadError(f"Cannot open staged file {path}: {exc}") from exc
        return _close_after(handle)

    def exists(self, path: Path | str | None) -> bool:
        if not path:
            return False
        return Path(path).is_file()

    def delete(self, path: Path | str | None) -> bool:
        """Remove a staged file. Missing files are not an error.

        Returns:
            True if a file was removed.
        """
        if not path:
            return False
        try:
            Path(path).unlink()
        except FileNotFoundError:
            return False
        return True

    @contextmanager
    def temporary_path(self, document_id: str, original_name: str) -> Generator[Path, None, None]:
        """Reserve a temp file path and remove whatever is there on exit.

        Removal runs on every exit path, including exceptions raised inside
        the block and generator close on cancellation.
        """
        path = self._root / self.generate_temp_name(document_id, original_name)
        try:
            yield path
        finally:
            try:
                if self.delete(path):
                    Log.debug(f"Removed temporary file {path.name}")
            except OSError as exc:
                Log.error(f"Failed to remove temporary file {path}: {exc}")

    def _write(self, path: Path, chunks: Iterable[bytes], max_bytes: int | None) -> int:
        written = 0
        try:
            with path.open("wb") as handle:
                for chunk in chunks:
                    written += len(chunk)
                    if max_bytes is not None and written > max_bytes:
                        raise StagingSizeLimitError(
                            f"Stream exceeds the {max_bytes} byte limit"
                        )
                    handle.write(chunk)
        except StagingSizeLimitError:
            self._discard(path)
            raise
        except OSError as exc:
            self._discard(path)
            raise StagingWriteError(f"Cannot write staged file {path.name}: {exc}") from exc
        except Exception:
            self._discard(path)
            raise
        return written

    def _discard(self, path: Path) -> None:
        try:
            self.delete(path)
        except OSError as exc:
            Log.error(f"Failed to remove partial file {path}: {exc}")


def _close_after(handle: BinaryIO) -> Iterator[bytes]:
    with handle:
        while chunk := handle.read(CHUNK_SIZE):
            yield chunk
