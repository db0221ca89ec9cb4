"""Lifecycle of the compiled gateway helper.

The gateway runs as a separate process from a zipapp built out of this
package's sources. Before each operation the builder checks that the
archive exists and is newer than every source file, rebuilding it
otherwise. Concurrent callers share one in-flight build.
"""

import logging
import os
import tempfile
import threading
import time
import zipapp
import zipfile
from dataclasses import dataclass, field
from pathlib import Path

import anyio

from .constants import HELPER_ARTIFACT_NAME, HELPER_CACHE_DIR, HELPER_ENTRY_POINT
from .exceptions import HelperBuildError

logger = logging.getLogger(__name__)


@dataclass
class _BuildAttempt:
    done: anyio.Event = field(default_factory=anyio.Event)
    error: Exception | None = None


class HelperBuilder:
    """Builds the gateway archive on demand.

    Usage:
        builder = HelperBuilder.get_instance()
        artifact = await builder.ensure_built()
    """

    _instance: "HelperBuilder | None" = None
    _lock = threading.Lock()

    def __init__(
        self,
        source_dir: Path,
        artifact_path: Path,
        entry_point: str = HELPER_ENTRY_POINT,
    ) -> None:
        """
        Args:
            source_dir: Package directory bundled into the archive
            artifact_path: Where the built archive is published
            entry_point: ``module:function`` relative to the package
        """
        self.source_dir = source_dir
        self.artifact_path = artifact_path
        self.entry_point = f"{source_dir.name}.{entry_point}"
        self._inflight: _BuildAttempt | None = None
        self._build_lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> "HelperBuilder":
        """Get or create the process-wide builder for this package."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls(
                        source_dir=Path(__file__).resolve().parent,
                        artifact_path=HELPER_CACHE_DIR / HELPER_ARTIFACT_NAME,
                    )
        return cls._instance

    def source_files(self) -> list[Path]:
        """All Python sources that make up the helper."""
        return sorted(
            path
            for path in self.source_dir.rglob("*.py")
            if "__pycache__" not in path.parts
        )

    def source_mtime(self) -> float:
        """Modification time of the newest source file."""
        return max((path.stat().st_mtime for path in self.source_files()), default=0.0)

    def is_stale(self) -> bool:
        """Whether the archive is missing, unreadable or older than its sources."""
        try:
            artifact_mtime = self.artifact_path.stat().st_mtime
        except OSError:
            return True
        if not zipfile.is_zipfile(self.artifact_path):
            return True
        return self.source_mtime() > artifact_mtime

    async def ensure_built(self) -> Path:
        """Return the archive path, building it first if it is stale.

        The staleness check walks the source tree, so it runs in a worker
        thread as part of the shared attempt.

        Raises:
            HelperBuildError: If the build fails; every caller waiting on
                the same build receives the error
        """
        attempt = self._inflight
        if attempt is not None:
            await attempt.done.wait()
            if attempt.error is not None:
                raise HelperBuildError(str(attempt.error)) from attempt.error
            return self.artifact_path

        attempt = self._inflight = _BuildAttempt()
        try:
            await anyio.to_thread.run_sync(self._build_if_stale)
        except Exception as e:
            attempt.error = e
            raise
        finally:
            self._inflight = None
            attempt.done.set()

        return self.artifact_path

    def _build_if_stale(self) -> None:
        with self._build_lock:
            if self.is_stale():
                self.build()

    def build(self) -> None:
        """Compile the sources and atomically publish a fresh archive.

        Raises:
            HelperBuildError: If a source fails to compile or the archive
                cannot be written; the previous archive is left in place
        """
        started = time.monotonic()
        logger.info(f"Building reminders gateway helper at {self.artifact_path}")

        try:
            self.artifact_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.TemporaryDirectory(
                dir=self.artifact_path.parent, prefix=".build-"
            ) as staging:
                staging_dir = Path(staging)
                root = staging_dir / "src"
                newest = self._stage_sources(root / self.source_dir.name)

                staged = staging_dir / self.artifact_path.name
                zipapp.create_archive(
                    root, target=staged, main=self.entry_point, compressed=True
                )
                stamp = max(time.time(), newest)
                os.utime(staged, (stamp, stamp))
                os.replace(staged, self.artifact_path)
        except HelperBuildError:
            raise
        except (OSError, zipapp.ZipAppError) as e:
            raise HelperBuildError(f"Failed to build gateway helper: {e}") from e

        logger.info(
            f"Built reminders gateway helper in {time.monotonic() - started:.2f}s"
        )

    def _stage_sources(self, package_dir: Path) -> float:
        newest = 0.0
        for source in self.source_files():
            relative = source.relative_to(self.source_dir)
            code = source.read_text(encoding="utf-8")
            try:
                compile(code, str(source), "exec")
            except SyntaxError as e:
                raise HelperBuildError(
                    f"Failed to compile gateway helper source {relative}, "
                    f"line {e.lineno}: {e.msg}"
                ) from e

            target = package_dir / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(code, encoding="utf-8")
            newest = max(newest, source.stat().st_mtime)
        return newest
