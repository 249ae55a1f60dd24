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

import typer
from loguru import logger

from sdkmigrator.context import GlobalContext, MigrateContext
from sdkmigrator.core.exceptions import directory_not_found
from sdkmigrator.core.file_reader.language_mapper import Language
from sdkmigrator.core.logging.utils import time_block
from sdkmigrator.core.migrations.selection import Migration, TypingMode, select_strategy
from sdkmigrator.pipelines.migrate_pipeline import MigratePipeline


def validate_directory(directory: str) -> Path:
    path = Path(directory)
    if not path.is_dir():
        raise directory_not_found(directory)
    return path


def main(
    ctx: typer.Context,
    directory: str = typer.Option(
        ..., "--directory", "-d", help="Code directory to process."
    ),
    language: Language = typer.Option(
        ..., "--language", "-l", case_sensitive=False, help="Programming language."
    ),
    migration: Migration = typer.Option(
        ..., "--migration", "-m", help="Migration name (e.g., v1-namespace)."
    ),
    execute: bool = typer.Option(
        False,
        "--execute",
        "-x",
        help="Execute mode will modify files in your codebase.",
    ),
    untyped: bool = typer.Option(
        False,
        "--untyped",
        "-u",
        help="Untyped mode for codebases that are not typed.",
    ),
) -> None:
    """
    Rewrites client calls onto the versioned namespace.

    Runs as a dry run unless --execute is given.

    Examples:
        # See which files would change
        sdk-migrator migrate -d ./src -m v1-namespace -l java

        # Rewrite an untyped Python codebase in place
        sdk-migrator migrate -d ./src -m v1-namespace -l python --untyped --execute
    """
    global_context: GlobalContext = ctx.obj

    migrate_context = MigrateContext(
        directory=validate_directory(directory),
        language=language,
        migration=migration,
        typing_mode=TypingMode.UNTYPED if untyped else TypingMode.TYPED,
        execute=execute,
    )

    strategy = select_strategy(
        migrate_context.migration,
        migrate_context.language,
        migrate_context.typing_mode,
        global_context.migration_config,
    )

    logger.debug(
        "Migrate command started: {migration} {language} {mode} execute={execute}",
        migration=migrate_context.migration.value,
        language=migrate_context.language.value,
        mode=migrate_context.typing_mode.value,
        execute=migrate_context.execute,
    )

    if migrate_context.typing_mode is TypingMode.UNTYPED:
        logger.warning(
            "[yellow]Untyped mode matches calls by service name only; "
            "review every change for calls on unrelated objects.[/yellow]"
        )

    with time_block("Migrate Pipeline E2E"):
        pipeline = MigratePipeline(
            strategy, execute=migrate_context.execute, jobs=global_context.jobs
        )
        report = pipeline.run(migrate_context.directory)

    if migrate_context.execute:
        logger.info(
            "Migration complete. Please review and test your code before deploying."
        )
    else:
        logger.info(
            'Dry run complete. Re-run this command with "--execute" flag to apply the changes.'
        )

    if report.failed:
        logger.error(
            f"{len(report.failed)} file(s) were not migrated and need manual review"
        )
        raise typer.Exit(1)
