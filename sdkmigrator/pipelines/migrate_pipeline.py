# -----------------------------------------------------------------------------
# sdkmigrator - Dual Licensed Software
# Copyright (c) 2025 Adem Can
#
# This file is part of sdkmigrator.
#
# sdkmigrator is available under a dual-license:
#   1. AGPLv3 (Affero General Public License v3)
#      - See LICENSE.txt and LICENSE-AGPL.txt
#      - Online: https://www.gnu.org/licenses/agpl-3.0.html
#
#   2. Commercial License
#      - For proprietary or revenue-generating use,
#        including SaaS, embedding in closed-source software,
#        or avoiding AGPL obligations.
#      - See LICENSE.txt and COMMERCIAL-LICENSE.txt
#      - Contact: ademfcan@gmail.com
#
# By using this file, you agree to the terms of one of the two licenses above.
# -----------------------------------------------------------------------------


import os
import shutil
import tempfile
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from loguru import logger

from sdkmigrator.core.exceptions import FileSystemError, sdkmigratorError
from sdkmigrator.core.file_reader.file_parser import FileParser
from sdkmigrator.core.file_reader.language_mapper import Language
from sdkmigrator.core.migrations.strategy import MigrationStrategy


class FileStatus(str, Enum):
    MIGRATED = "migrated"
    WOULD_MIGRATE = "would migrate"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass(frozen=True)
class FileResult:
    path: Path
    status: FileStatus
    error: sdkmigratorError | None = None


@dataclass
class MigrationReport:
    results: list[FileResult] = field(default_factory=list)

    def with_status(self, status: FileStatus) -> list[FileResult]:
        return [r for r in self.results if r.status is status]

    @property
    def changed(self) -> list[FileResult]:
        return [
            r
            for r in self.results
            if r.status in (FileStatus.MIGRATED, FileStatus.WOULD_MIGRATE)
        ]

    @property
    def failed(self) -> list[FileResult]:
        return self.with_status(FileStatus.FAILED)


def discover_files(directory: Path, language: Language) -> list[Path]:
    """Files under `directory` matching the language globs, skipping hidden paths."""
    found: set[Path] = set()
    for pattern in language.globs:
        for path in directory.glob(pattern):
            relative = path.relative_to(directory)
            if any(part.startswith(".") for part in relative.parts):
                continue
            if path.is_file():
                found.add(path)
    return sorted(found)


def read_source(path: Path) -> str:
    try:
        # newline="" keeps \r\n intact so untouched bytes stay identical
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise FileSystemError(f"Failed to read {path}", str(e)) from e


def write_atomic(path: Path, content: str) -> None:
    """Replace `path` with `content`; on failure the original file is left as it was."""
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(content)
        shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise FileSystemError(f"Failed to write {path}", str(e)) from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)


class MigratePipeline:
    """Runs one strategy over every matching file of a directory."""

    def __init__(self, strategy: MigrationStrategy, execute: bool = False, jobs: int = 1):
        self.strategy = strategy
        self.execute = execute
        self.jobs = max(1, jobs)

    def migrate_file(self, path: Path) -> FileResult:
        """Read, parse, transform and (in execute mode) write back a single file."""
        try:
            content = read_source(path)
            unit = FileParser.parse(content, self.strategy.language, path)
            migrated = self.strategy.transform(unit)

            if migrated is None:
                logger.debug(f"No client calls to migrate in {path}")
                return FileResult(path, FileStatus.UNCHANGED)

            if self.execute:
                write_atomic(path, migrated)
                logger.info(f"Migrated file: {path}")
                return FileResult(path, FileStatus.MIGRATED)

            logger.info(f"Will migrate file: {path}")
            return FileResult(path, FileStatus.WOULD_MIGRATE)

        except sdkmigratorError as e:
            logger.error(f"[red]Not migrated[/red] {path}: {e.message}")
            if e.details:
                logger.debug(e.details)
            return FileResult(path, FileStatus.FAILED, e)

    def run(self, directory: Path) -> MigrationReport:
        logger.info(f"Processing: {directory}")
        files = discover_files(directory, self.strategy.language)
        logger.debug(f"Found {len(files)} {self.strategy.language.value} file(s)")

        if self.jobs > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self.jobs) as pool:
                results = list(pool.map(self.migrate_file, files))
        else:
            results = [self.migrate_file(path) for path in files]

        report = MigrationReport(results)
        logger.debug(
            "Migration summary: files={files} changed={changed} failed={failed}",
            files=len(results),
            changed=len(report.changed),
            failed=len(report.failed),
        )
        return report
