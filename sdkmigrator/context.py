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


from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field

from sdkmigrator.core.file_reader.language_mapper import Language
from sdkmigrator.core.migrations.models import (
    DEFAULT_CLIENT_TYPE_PATTERN,
    DEFAULT_LIBRARY_MODULE,
    MigrationConfig,
)
from sdkmigrator.core.migrations.selection import Migration, TypingMode


class GlobalConfig(BaseModel):
    client_type_pattern: str = Field(
        default=DEFAULT_CLIENT_TYPE_PATTERN,
        description="Regex matched against type annotations and constructor names of the client",
    )
    library_module: str = Field(
        default=DEFAULT_LIBRARY_MODULE,
        description="Name the client library is imported under (e.g. stripe)",
    )
    jobs: int = Field(default=1, ge=1, description="Number of files migrated in parallel")
    verbose: bool = Field(default=False, description="Enable verbose logging output")
    silent: bool = Field(
        default=False, description="Do not output any text to the console"
    )


@dataclass(frozen=True)
class GlobalContext:
    migration_config: MigrationConfig
    jobs: int
    verbose: bool
    silent: bool

    @classmethod
    def from_global_config(cls, config: GlobalConfig) -> "GlobalContext":
        return GlobalContext(
            MigrationConfig.from_settings(
                client_type_pattern=config.client_type_pattern,
                library_module=config.library_module,
            ),
            config.jobs,
            config.verbose,
            config.silent,
        )


@dataclass(frozen=True)
class MigrateContext:
    directory: Path
    language: Language
    migration: Migration
    typing_mode: TypingMode = TypingMode.TYPED
    execute: bool = False
