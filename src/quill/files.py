"""Derived-representation cache for files on disk.

Each path maps to a ``CacheEntry`` holding the raw bytes and, once
someone asks for it, the gzip-compressed bytes derived from them.
Entries are created on the first miss and only ever extended with a
missing representation; nothing is evicted or replaced for the life of
the process.

Keys are the path string exactly as given. Two spellings of the same
file are two entries.

Concurrent misses for one path share a single read through
``SingleFlight``. Compression is always derived from the stored raw
bytes under its own flight, so a compression failure only reaches
callers that asked for the compressed form.
"""

import gzip
import logging
from dataclasses import dataclass

import anyio

from quill._internal.singleflight import SingleFlight
from quill.config import ViewsConfig
from quill.engines.protocol import Compressor, Reader
from quill.errors import CompressionError, QuillError, ResourceNotFound, ResourceReadError

logger = logging.getLogger("quill.cache")


@dataclass(slots=True)
class CacheEntry:
    """Cached representations of one file.

    ``raw`` is set once. ``compressed`` starts out ``None`` when only the
    raw bytes were requested and is filled in on demand.
    """

    raw: bytes
    compressed: bytes | None = None


async def read_bytes(path: str) -> bytes:
    """Default reader: the whole file, off the event loop."""
    return await anyio.Path(path).read_bytes()


async def read_resource(reader: Reader, path: str) -> bytes:
    """Call *reader* and translate OS failures into quill errors."""
    try:
        return await reader(path)
    except QuillError:
        raise
    except FileNotFoundError as exc:
        raise ResourceNotFound(path, exc.strerror or "No such file") from exc
    except OSError as exc:
        raise ResourceReadError(path, exc.strerror or str(exc)) from exc


async def compress(compressor: Compressor, data: bytes, *, path: str = "") -> bytes:
    """Run *compressor* in a worker thread, wrapping any failure."""
    try:
        return await anyio.to_thread.run_sync(compressor, data)
    except Exception as exc:
        msg = f"Compression failed for {path}: {exc}" if path else f"Compression failed: {exc}"
        raise CompressionError(msg) from exc


class FileCache:
    """Read-through cache of raw and compressed file contents.

    Caching is gated by ``config.cache``. When it is off every call
    reads fresh and nothing is stored.

    Usage::

        files = FileCache(config)
        script = await files.get("/srv/public/app.js", zip=True)
    """

    __slots__ = ("_compressor", "_config", "_derivations", "_entries", "_loads", "_reader")

    def __init__(
        self,
        config: ViewsConfig,
        *,
        reader: Reader | None = None,
        compressor: Compressor | None = None,
    ) -> None:
        self._config = config
        self._reader: Reader = reader or read_bytes
        self._compressor: Compressor = compressor or gzip.compress
        self._entries: dict[str, CacheEntry] = {}
        self._loads: SingleFlight[str, CacheEntry] = SingleFlight()
        self._derivations: SingleFlight[str, bytes] = SingleFlight()

    def configure(self, config: ViewsConfig) -> None:
        """Swap in new configuration. Existing entries keep their keys."""
        self._config = config

    @property
    def enabled(self) -> bool:
        return self._config.cache

    def peek(self, path: str) -> CacheEntry | None:
        """Return the stored entry for *path* without any I/O."""
        return self._entries.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, path: str, *, cache: bool = True, zip: bool = False) -> bytes:  # noqa: A002
        """Return the raw (or, with ``zip=True``, compressed) contents of *path*.

        Args:
            path: Key and location of the file, used verbatim.
            cache: Store what gets computed on a miss.
            zip: Return the compressed representation instead of raw bytes.

        Raises:
            ResourceNotFound: The file does not exist.
            ResourceReadError: The file could not be read.
            CompressionError: Compression failed.
        """
        if self.enabled:
            entry = self._entries.get(path)
            if entry is not None:
                logger.debug("Cache hit for %s", path)
            elif cache:
                entry = await self._loads.do(path, lambda: self._fill(path))
            if entry is not None:
                return await self._representation(path, entry, zip=zip)

        entry = await self._load(path, zip=zip)
        return entry.compressed if zip else entry.raw  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _load(self, path: str, *, zip: bool) -> CacheEntry:  # noqa: A002
        logger.debug("Reading file for %s", path)
        raw = await read_resource(self._reader, path)
        compressed = await compress(self._compressor, raw, path=path) if zip else None
        return CacheEntry(raw=raw, compressed=compressed)

    async def _fill(self, path: str) -> CacheEntry:
        # Raw only; compression is derived per caller through _representation
        entry = await self._load(path, zip=False)
        return self._entries.setdefault(path, entry)

    async def _representation(self, path: str, entry: CacheEntry, *, zip: bool) -> bytes:  # noqa: A002
        if not zip:
            return entry.raw
        if entry.compressed is None:
            await self._derivations.do(path, lambda: self._derive(path, entry))
        return entry.compressed  # type: ignore[return-value]

    async def _derive(self, path: str, entry: CacheEntry) -> bytes:
        logger.debug("Compressing cached file %s", path)
        compressed = await compress(self._compressor, entry.raw, path=path)
        if entry.compressed is None:
            entry.compressed = compressed
        return entry.compressed
