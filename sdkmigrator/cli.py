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
from dotenv import load_dotenv
from loguru import logger
from platformdirs import user_config_dir
from rich.traceback import install

from sdkmigrator.commands import config, migrate
from sdkmigrator.context import GlobalConfig, GlobalContext
from sdkmigrator.core.config.config_loader import ConfigLoader
from sdkmigrator.core.exceptions import handle_sdkmigrator_exception
from sdkmigrator.core.logging.logging import setup_logger
from sdkmigrator.runtimeutil import (
    ensure_utf8_output,
    get_log_dir_callback,
    setup_signal_handlers,
    version_callback,
)

# create app
app = typer.Typer(
    help="sdk-migrator: rewrites client calls onto the versioned v1 namespace",
    pretty_exceptions_show_locals=False,
    pretty_exceptions_enable=False,
    add_completion=False,
)

# attach commands
app.command(name="migrate")(handle_sdkmigrator_exception(migrate.main))
app.command(name="config")(config.main)

# commands that run without a global context
config_command = "config"


def setup_config_args(**kwargs):
    config_args = {}

    for key, item in kwargs.items():
        if item is not None:
            config_args[key] = item

    return config_args


@app.callback(invoke_without_command=True)
@handle_sdkmigrator_exception
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        help="Show version and exit",
    ),
    log_path: bool = typer.Option(
        False,
        "--log-dir",
        "-LD",
        callback=get_log_dir_callback,
        help="Show log path (where logs for sdk-migrator live) and exit",
    ),
    custom_config: str | None = typer.Option(
        None,
        "--custom-config",
        help="Path to a custom config file",
    ),
    client_type_pattern: str | None = typer.Option(
        None,
        "--client-type-pattern",
        help="Regex matched against the client's type annotations and constructor names.",
    ),
    library_module: str | None = typer.Option(
        None,
        "--library-module",
        help="Name the client library is imported under.",
    ),
    jobs: int | None = typer.Option(
        None,
        "--jobs",
        "-j",
        min=1,
        help="Number of files migrated in parallel.",
    ),
    verbose: bool | None = typer.Option(
        None,
        "--verbose",
        "-v",
        help="Enable verbose logging.",
    ),
    silent: bool | None = typer.Option(
        None,
        "--silent",
        "-s",
        help="Do not output any text to the console.",
    ),
) -> None:
    """
    Global setup callback. Initialize shared objects here.
    """
    # skip --help in subcommands
    if any(arg in ctx.help_option_names for arg in ctx.args):
        return

    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit()

    # initial setup of logger, will be updated once config is loaded
    setup_logger(ctx.invoked_subcommand, debug=verbose or False, silent=silent or False)

    if ctx.invoked_subcommand == config_command:
        return

    config_args = setup_config_args(
        client_type_pattern=client_type_pattern,
        library_module=library_module,
        jobs=jobs,
        verbose=verbose,
        silent=silent,
    )

    local_config_path = Path("sdkmigratorconfig.toml")
    env_prefix = "sdkmigrator_"
    global_config_path = (
        Path(user_config_dir("sdkmigrator")) / "sdkmigratorconfig.toml"
    )
    custom_config_path = Path(custom_config) if custom_config else None

    config_model, used_configs, used_defaults = ConfigLoader.get_full_config(
        GlobalConfig,
        config_args,
        local_config_path,
        env_prefix,
        global_config_path,
        custom_config_path,
    )

    setup_logger(
        ctx.invoked_subcommand, debug=config_model.verbose, silent=config_model.silent
    )

    if not used_configs and used_defaults:
        logger.debug("No configuration found. Using default values.")

    logger.debug(f"Used {used_configs} to build global context.")
    ctx.obj = GlobalContext.from_global_config(config_model)


def run_app():
    """Run the application with global exception handling."""
    # force stdout to be utf8 as rich output can be weird otherwise
    ensure_utf8_output()
    # Set up signal handlers for graceful shutdown
    setup_signal_handlers()
    install(show_locals=False)
    # load any .env files
    load_dotenv()
    # launch cli
    app(prog_name="sdk-migrator")


if __name__ == "__main__":
    run_app()
