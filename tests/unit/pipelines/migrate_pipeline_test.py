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


import pytest
from unittest.mock import patch
from sdkmigrator.core.exceptions import FileSystemError, OverlappingEditError
from sdkmigrator.core.file_reader.language_mapper import Language
from sdkmigrator.core.migrations.java_typed import JavaTypedStrategy
from sdkmigrator.core.migrations.models import MigrationConfig
from sdkmigrator.core.migrations.python_typed import PythonTypedStrategy
from sdkmigrator.pipelines.migrate_pipeline import (
    FileStatus,
    MigratePipeline,
    discover_files,
    read_source,
    write_atomic,
)

TYPED_SOURCE = """\
def list_customers(client: StripeClient):
    return client.customers.list()
"""

MIGRATED_SOURCE = """\
def list_customers(client: StripeClient):
    return client.v1.customers.list()
"""

# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def project(tmp_path):
    (tmp_path / "billing").mkdir()
    (tmp_path / "billing" / "customers.py").write_text(TYPED_SOURCE, encoding="utf-8")
    (tmp_path / "billing" / "plain.py").write_text("print('hello')\n", encoding="utf-8")
    (tmp_path / "broken.py").write_text("def broken(:\n", encoding="utf-8")
    (tmp_path / ".venv").mkdir()
    (tmp_path / ".venv" / "vendored.py").write_text(TYPED_SOURCE, encoding="utf-8")
    (tmp_path / "Billing.java").write_text("class Billing {}\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def strategy():
    return PythonTypedStrategy(MigrationConfig())


# -----------------------------------------------------------------------------
# Tests
# -----------------------------------------------------------------------------


def test_discover_files_skips_hidden_and_other_languages(project):
    files = discover_files(project, Language.PYTHON)

    assert files == [
        project / "billing" / "customers.py",
        project / "billing" / "plain.py",
        project / "broken.py",
    ]
    assert discover_files(project, Language.JAVA) == [project / "Billing.java"]


def test_dry_run_leaves_files_unchanged(project, strategy):
    report = MigratePipeline(strategy).run(project)

    statuses = {r.path.name: r.status for r in report.results}
    assert statuses == {
        "customers.py": FileStatus.WOULD_MIGRATE,
        "plain.py": FileStatus.UNCHANGED,
        "broken.py": FileStatus.FAILED,
    }
    assert (project / "billing" / "customers.py").read_text(encoding="utf-8") == TYPED_SOURCE


def test_execute_writes_migrated_source(project, strategy):
    report = MigratePipeline(strategy, execute=True).run(project)

    assert [r.path.name for r in report.with_status(FileStatus.MIGRATED)] == ["customers.py"]
    assert (project / "billing" / "customers.py").read_text(encoding="utf-8") == MIGRATED_SOURCE
    assert (project / ".venv" / "vendored.py").read_text(encoding="utf-8") == TYPED_SOURCE


def test_failed_file_does_not_stop_the_batch(project, strategy):
    report = MigratePipeline(strategy, execute=True).run(project)

    assert [r.path.name for r in report.failed] == ["broken.py"]
    assert report.failed[0].error is not None
    assert len(report.changed) == 1


class CollidingStrategy(PythonTypedStrategy):
    """Plans every `delete` rewrite twice so its edits collide."""

    @staticmethod
    def distinct(matches):
        planned = []
        for match in matches:
            planned.append(match)
            if match.call_site.invoked_member == "delete":
                planned.append(match)
        return planned


def test_overlapping_edits_fail_only_that_file(tmp_path):
    conflicting = """\
def remove(client: StripeClient):
    return client.customers.delete("cus_1")
"""
    (tmp_path / "conflict.py").write_text(conflicting, encoding="utf-8")
    (tmp_path / "ok.py").write_text(TYPED_SOURCE, encoding="utf-8")

    report = MigratePipeline(CollidingStrategy(MigrationConfig()), execute=True).run(tmp_path)

    statuses = {r.path.name: r.status for r in report.results}
    assert statuses == {"conflict.py": FileStatus.FAILED, "ok.py": FileStatus.MIGRATED}
    assert isinstance(report.failed[0].error, OverlappingEditError)
    assert (tmp_path / "conflict.py").read_text(encoding="utf-8") == conflicting
    assert (tmp_path / "ok.py").read_text(encoding="utf-8") == MIGRATED_SOURCE


def test_second_run_is_a_no_op(project, strategy):
    MigratePipeline(strategy, execute=True).run(project)
    report = MigratePipeline(strategy, execute=True).run(project)

    assert report.changed == []


def test_parallel_run_matches_sequential(project, strategy):
    sequential = MigratePipeline(strategy).run(project)
    parallel = MigratePipeline(strategy, jobs=4).run(project)

    assert [(r.path, r.status) for r in parallel.results] == [
        (r.path, r.status) for r in sequential.results
    ]


def test_java_pipeline(tmp_path):
    source = tmp_path / "Billing.java"
    source.write_text(
        "class Billing {\n"
        "    void run(StripeClient client) {\n"
        "        client.customers().list();\n"
        "    }\n"
        "}\n",
        encoding="utf-8",
    )

    report = MigratePipeline(JavaTypedStrategy(MigrationConfig()), execute=True).run(tmp_path)

    assert report.results[0].status is FileStatus.MIGRATED
    assert "client.v1().customers().list();" in source.read_text(encoding="utf-8")


def test_crlf_line_endings_are_preserved(tmp_path, strategy):
    path = tmp_path / "crlf.py"
    path.write_bytes(TYPED_SOURCE.replace("\n", "\r\n").encode("utf-8"))

    MigratePipeline(strategy, execute=True).run(tmp_path)

    assert path.read_bytes() == MIGRATED_SOURCE.replace("\n", "\r\n").encode("utf-8")


def test_read_source_rejects_undecodable_file(tmp_path):
    path = tmp_path / "latin1.py"
    path.write_bytes("name = 'caf\xe9'\n".encode("latin-1"))

    with pytest.raises(FileSystemError):
        read_source(path)


def test_write_atomic_keeps_original_on_failure(tmp_path):
    path = tmp_path / "module.py"
    path.write_text("original\n", encoding="utf-8")

    with patch("sdkmigrator.pipelines.migrate_pipeline.os.replace") as mock_replace:
        mock_replace.side_effect = OSError("disk full")
        with pytest.raises(FileSystemError):
            write_atomic(path, "rewritten\n")

    assert path.read_text(encoding="utf-8") == "original\n"
    assert [p.name for p in tmp_path.iterdir()] == ["module.py"]
