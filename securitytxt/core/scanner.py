from __future__ import annotations

import fnmatch
import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterator, List, Optional

from tqdm import tqdm

from .constants import FILENAME
from .errors import ParseError
from .fields import parse_line
from .models import LineResult
from .utils import iter_lines, read_text_safely


DEFAULT_LOGGER_NAME = "securitytxt"
SLOW_SCAN_THRESHOLD_SECONDS = 2.0
DEFAULT_MAX_FILE_SIZE = 1_000_000


def configure_logging(verbose: bool = False, logger_name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """Configure and return the package logger.

    Ensures a handler exists even in script usage where ``logging.basicConfig``
    was not called. ``verbose`` raises the level from WARNING to INFO.
    """

    logger = logging.getLogger(logger_name)
    level = logging.INFO if verbose else logging.WARNING
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s - %(message)s")
        )
        logger.addHandler(handler)

    return logger


def parse_text(path: Path, content: str, logger: logging.Logger) -> List[LineResult]:
    """Run every non-blank line of ``content`` through :func:`parse_line`."""
    results: List[LineResult] = []
    for line_num, text in iter_lines(content):
        if not text.strip():
            continue
        try:
            line = parse_line(text)
        except ParseError as exc:
            logger.info("%s:%d: %s", path, line_num, exc)
            results.append(LineResult.from_error(path, line_num, text, exc))
            continue
        results.append(LineResult.from_line(path, line_num, text, line))
    return results


class SingleFileScanner:
    def __init__(
        self,
        file_path: Path,
        *,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        logger: Optional[logging.Logger] = None,
        verbose: bool = False,
    ) -> None:
        self.file_path = file_path
        self.max_file_size = max_file_size
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())
        self.verbose = verbose
        if verbose:
            self.logger.setLevel(logging.INFO)
        self.results: List[LineResult] = []

    def scan(self) -> List[LineResult]:
        content = read_text_safely(self.file_path, max_bytes=self.max_file_size)
        if content is None:
            self.logger.warning("Skipping %s: unreadable or not text", self.file_path)
            return self.results
        self.results = parse_text(self.file_path, content, self.logger)
        return self.results


class DirectoryScanner:
    def __init__(
        self,
        root: Path,
        include_globs: Optional[List[str]] = None,
        exclude_dirs: Optional[List[str]] = None,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        workers: int = 8,
        *,
        logger: Optional[logging.Logger] = None,
        verbose: bool = False,
        show_progress: bool = True,
        progress_desc: str = "Parsing files",
    ) -> None:
        self.root = root
        self.include_globs = include_globs or [FILENAME]
        self.exclude_dirs = set(exclude_dirs or [])
        self.max_file_size = max_file_size
        self.workers = workers
        base_logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self.logger = base_logger.getChild(self.__class__.__name__.lower())
        self.verbose = verbose
        if verbose:
            self.logger.setLevel(logging.INFO)
        self.show_progress = bool(show_progress)
        self.progress_desc = progress_desc
        self.results: List[LineResult] = []
        self._results_lock = threading.Lock()
        self._slow_log_threshold = SLOW_SCAN_THRESHOLD_SECONDS

    def _iter_files(self) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(self.root):
            # prune in place so excluded trees are never entered
            dirnames[:] = sorted(d for d in dirnames if d not in self.exclude_dirs)
            for name in sorted(filenames):
                if not any(fnmatch.fnmatch(name, pat) for pat in self.include_globs):
                    continue
                p = Path(dirpath) / name
                try:
                    if p.stat().st_size <= self.max_file_size:
                        yield p
                    elif self.verbose:
                        self.logger.info("Skipping %s: larger than %d bytes", p, self.max_file_size)
                except OSError as exc:
                    if self.verbose:
                        self.logger.warning("Unable to stat %s: %s", p, exc)
                    continue

    def scan(self) -> List[LineResult]:
        files = list(self._iter_files())
        total_files = len(files)

        if self.verbose:
            self.logger.info("Discovered %d file(s) to parse", total_files)

        if not total_files:
            return self.results

        progress_bar = None
        if self.show_progress:
            progress_bar = tqdm(total=total_files, desc=self.progress_desc, unit="file")

        executor = ThreadPoolExecutor(max_workers=self.workers)
        try:
            futures = {executor.submit(self._scan_file, path): path for path in files}
            for future in as_completed(futures):
                path = futures[future]
                try:
                    future.result()
                except Exception as exc:
                    if self.verbose:
                        self.logger.exception("Error parsing %s", path)
                    else:
                        self.logger.warning("Error parsing %s: %s", path, exc)
                finally:
                    if progress_bar is not None:
                        progress_bar.update(1)
        except KeyboardInterrupt:
            if self.verbose:
                self.logger.info("Scan interrupted by user; shutting down workers")
            raise
        finally:
            executor.shutdown(wait=True, cancel_futures=True)
            if progress_bar is not None:
                progress_bar.close()

        self.results.sort(key=lambda r: (r.file_location, r.line_num))
        return self.results

    def _scan_file(self, path: Path) -> None:
        start_time = time.perf_counter()
        content = read_text_safely(path, max_bytes=self.max_file_size)
        if content is None:
            self.logger.warning("Skipping %s: unreadable or not text", self._format_display_path(path))
            return
        if self.verbose:
            self.logger.info("Processing %s", self._format_display_path(path))
        results = parse_text(path, content, self.logger)
        with self._results_lock:
            self.results.extend(results)
        duration = time.perf_counter() - start_time
        if duration >= self._slow_log_threshold and self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(
                "Slow parse for %s took %.2fs (%d line(s))",
                self._format_display_path(path),
                duration,
                len(results),
            )

    def _format_display_path(self, path: Path) -> str:
        try:
            return str(path.relative_to(self.root))
        except ValueError:
            return str(path)
