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
from typer.testing import CliRunner

from sdkmigrator.cli import app


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Run the CLI from an empty directory with logs and user config kept in tmp."""
    work = tmp_path / "work"
    work.mkdir()
    user_config = tmp_path / "user_config"

    monkeypatch.chdir(work)
    monkeypatch.setattr("sdkmigrator.core.logging.logging.LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr("sdkmigrator.cli.user_config_dir", lambda app_name: str(user_config))
    monkeypatch.setattr(
        "sdkmigrator.commands.config.user_config_dir", lambda app_name: str(user_config)
    )
    monkeypatch.setenv("SDKMIGRATOR_LOG_LEVEL", "INFO")
    monkeypatch.setenv("SDKMIGRATOR_CONSOLE_LOG_LEVEL", "INFO")
    monkeypatch.setenv("COLUMNS", "200")
    return work


def run_cli(args):
    return CliRunner().invoke(app, args)
