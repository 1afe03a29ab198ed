from __future__ import annotations

import json
import logging
import os
import shlex
import subprocess
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Callable, cast, final

from typing_extensions import override

from bundle_size_reporter.application.scheduler.apscheduler_runner import APSchedulerRunner
from bundle_size_reporter.domain.models.build_result import (
    AssetDescriptor,
    BuildStats,
    CompileError,
)
from bundle_size_reporter.domain.protocols.bundler_port import (
    BundlerPort,
    CompletionCallback,
    WatchHandle,
)
from bundle_size_reporter.domain.protocols.scheduler_port import SchedulerPort

BuildResult = tuple[BaseException | None, BuildStats | None]

_OUTPUT_PATH_FLAGS = frozenset({"--output-path", "-o"})


class BundlerInvocationError(RuntimeError):
    pass


def _compile_error(raw: object) -> CompileError:
    if isinstance(raw, Mapping):
        fields = cast(Mapping[str, object], raw)
        message = fields.get("message")
        return CompileError(message=str(message) if message else None, raw=raw)
    text = str(raw)
    return CompileError(message=text or None, raw=raw)


def parse_stats(stdout: str) -> BuildStats:
    """Parse webpack ``--json`` output into build statistics.

    Anything printed around the JSON document (npx notices, banners) is ignored.
    """
    start = stdout.find("{")
    if start < 0:
        raise ValueError("Bundler output contains no JSON stats")
    data, _end = cast(tuple[object, int], json.JSONDecoder().raw_decode(stdout, start))
    if not isinstance(data, dict):
        raise ValueError("Bundler stats must be a JSON object")
    stats = cast(dict[str, object], data)

    assets: list[AssetDescriptor] = []
    for raw_asset in cast(list[object], stats.get("assets") or []):
        if not isinstance(raw_asset, dict):
            continue
        asset = cast(dict[str, object], raw_asset)
        name = str(asset.get("name") or "").strip()
        if name:
            assets.append(AssetDescriptor(name=name))

    errors = tuple(_compile_error(raw) for raw in cast(list[object], stats.get("errors") or []))
    warnings = tuple(
        str(_compile_error(raw)) for raw in cast(list[object], stats.get("warnings") or [])
    )
    return BuildStats(assets=tuple(assets), errors=errors, warnings=warnings)


def with_output_path(argv: list[str], output_dir: Path) -> list[str]:
    """Point the bundler at ``output_dir`` unless the command already does."""
    for arg in argv:
        if arg in _OUTPUT_PATH_FLAGS or arg.startswith("--output-path="):
            return list(argv)
    return [*argv, "--output-path", str(output_dir)]


def source_fingerprint(
    source_dir: Path, ignored_dirs: tuple[Path, ...] = ()
) -> dict[str, tuple[int, int]]:
    fingerprint: dict[str, tuple[int, int]] = {}
    if not source_dir.is_dir():
        return fingerprint
    for path in source_dir.rglob("*"):
        # Build output and the lock/log directory change on every build.
        if any(path.is_relative_to(ignored) for ignored in ignored_dirs):
            continue
        try:
            if not path.is_file():
                continue
            stat = path.stat()
        except OSError:
            continue
        fingerprint[str(path)] = (int(stat.st_size), int(stat.st_mtime_ns))
    return fingerprint


@final
class CommandBundlerGateway(BundlerPort):
    def __init__(
        self,
        command: str,
        app_root: Path,
        source_dir: Path,
        output_dir: Path,
        timeout_seconds: int | None,
        debug: bool = False,
        watch_ignored_dirs: tuple[Path, ...] = (),
        scheduler_factory: Callable[[], SchedulerPort] = APSchedulerRunner,
        logger: logging.Logger | None = None,
    ) -> None:
        argv = shlex.split(command)
        if not argv:
            raise ValueError("Bundler command is empty")
        self._argv = with_output_path(argv, output_dir)
        self._app_root = app_root
        self._source_dir = source_dir
        self._output_dir = output_dir
        self._timeout_seconds = timeout_seconds
        self._debug = debug
        self._watch_ignored_dirs = (output_dir, *watch_ignored_dirs)
        self._scheduler_factory = scheduler_factory
        self._log = logger or logging.getLogger("bundle_size_reporter.bundler")

    def _environment(self) -> dict[str, str]:
        env = dict(os.environ)
        env["NODE_ENV"] = "development" if self._debug else "production"
        env["BUILD_OUTPUT_PATH"] = str(self._output_dir)
        return env

    def _run_process(self) -> subprocess.CompletedProcess[str]:
        self._log.debug("Running bundler: %s", shlex.join(self._argv))
        return subprocess.run(
            self._argv,
            cwd=self._app_root,
            check=False,
            capture_output=True,
            text=True,
            timeout=self._timeout_seconds,
            env=self._environment(),
        )

    def build(self) -> BuildResult:
        try:
            result = self._run_process()
        except (OSError, subprocess.TimeoutExpired) as exc:
            return exc, None

        try:
            stats = parse_stats(result.stdout)
        except ValueError as exc:
            detail = result.stderr.strip() or str(exc)
            return (
                BundlerInvocationError(
                    f"Bundler exited with status {result.returncode}: {detail}"
                ),
                None,
            )

        if result.returncode != 0 and not stats.errors:
            detail = result.stderr.strip() or "no compile errors reported"
            return (
                BundlerInvocationError(
                    f"Bundler exited with status {result.returncode}: {detail}"
                ),
                None,
            )
        for warning in stats.warnings:
            self._log.warning("Bundler warning: %s", warning)
        return None, stats

    @override
    def run(self, on_complete: CompletionCallback) -> None:
        error, stats = self.build()
        _ = on_complete(error, stats)

    @override
    def watch(self, interval_seconds: float, on_complete: CompletionCallback) -> WatchHandle:
        session = WatchSession(
            build=self.build,
            source_dir=self._source_dir,
            ignored_dirs=self._watch_ignored_dirs,
            interval_seconds=interval_seconds,
            on_complete=on_complete,
            scheduler=self._scheduler_factory(),
            logger=self._log,
        )
        session.start()
        return session


@final
class WatchSession:
    """Rebuild whenever the source tree fingerprint changes.

    The scheduler job runs with ``max_instances=1`` and ``coalesce=True`` so
    ticks that fire while a build is in flight are merged into one.
    """

    def __init__(
        self,
        build: Callable[[], BuildResult],
        source_dir: Path,
        interval_seconds: float,
        on_complete: CompletionCallback,
        scheduler: SchedulerPort,
        logger: logging.Logger,
        ignored_dirs: tuple[Path, ...] = (),
    ) -> None:
        self._build = build
        self._source_dir = source_dir
        self._ignored_dirs = ignored_dirs
        self._interval_seconds = interval_seconds
        self._on_complete = on_complete
        self._scheduler = scheduler
        self._log = logger
        self._last_fingerprint: dict[str, tuple[int, int]] | None = None
        self._closed = threading.Event()
        self.builds = 0

    def tick(self) -> bool:
        if self._closed.is_set():
            return False
        fingerprint = source_fingerprint(self._source_dir, self._ignored_dirs)
        if fingerprint == self._last_fingerprint:
            return False
        if self._last_fingerprint is not None:
            self._log.info("Source change detected in %s, rebuilding", self._source_dir)
        self._last_fingerprint = fingerprint

        error, stats = self._build()
        self.builds += 1
        try:
            _ = self._on_complete(error, stats)
        except Exception:
            self._log.exception("Build completion handling failed")
        return True

    def start(self) -> None:
        _ = self.tick()
        self._scheduler.schedule_interval("bundler-watch", self._interval_seconds, self.tick)
        self._scheduler.start()

    def close(self) -> None:
        if self._closed.is_set():
            return
        self._closed.set()
        self._scheduler.shutdown()
