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


from pathlib import Path

import pytest
from sdkmigrator.context import GlobalConfig, GlobalContext, MigrateContext
from sdkmigrator.core.exceptions import ConfigurationError
from sdkmigrator.core.file_reader.language_mapper import Language
from sdkmigrator.core.migrations.selection import Migration, TypingMode

# -----------------------------------------------------------------------------
# GlobalConfig Tests
# -----------------------------------------------------------------------------


def test_global_config_defaults():
    """Test default values of GlobalConfig."""
    config = GlobalConfig()
    assert config.client_type_pattern == r"\bStripeClient\b"
    assert config.library_module == "stripe"
    assert config.jobs == 1
    assert config.verbose is False
    assert config.silent is False


def test_global_config_rejects_zero_jobs():
    with pytest.raises(ValueError):
        GlobalConfig(jobs=0)


# -----------------------------------------------------------------------------
# GlobalContext Tests
# -----------------------------------------------------------------------------


def test_global_context_from_config():
    config = GlobalConfig(
        client_type_pattern=r"\bAcmeClient\b", library_module="acme", jobs=3, verbose=True
    )

    context = GlobalContext.from_global_config(config)

    assert context.migration_config.client_type_pattern.pattern == r"\bAcmeClient\b"
    assert context.migration_config.library_module == "acme"
    assert context.jobs == 3
    assert context.verbose is True
    assert context.silent is False


def test_global_context_invalid_pattern():
    with pytest.raises(ConfigurationError):
        GlobalContext.from_global_config(GlobalConfig(client_type_pattern="[unclosed"))


# -----------------------------------------------------------------------------
# MigrateContext Tests
# -----------------------------------------------------------------------------


def test_migrate_context_defaults():
    context = MigrateContext(Path("src"), Language.PYTHON, Migration.V1_NAMESPACE)

    assert context.typing_mode is TypingMode.TYPED
    assert context.execute is False
