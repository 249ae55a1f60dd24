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
import tomllib
from enum import Enum
from pathlib import Path
from textwrap import shorten
from typing import Any

import typer
from platformdirs import user_config_dir
from rich import print as rprint

from sdkmigrator.context import GlobalConfig

CONFIG_FILENAME = "sdkmigratorconfig.toml"
ENV_PREFIX = "sdkmigrator_"


class ConfigScope(str, Enum):
    LOCAL = "local"
    GLOBAL = "global"
    ENV = "env"


def global_config_path() -> Path:
    return Path(user_config_dir("sdkmigrator")) / CONFIG_FILENAME


def display_config(rows: list[dict[str, str]], max_value_length: int = 50) -> None:
    """
    Display config rows in a two-line format:
    Key: Description
      Value (Source)
    """
    for row in rows:
        value_display = shorten(row["value"], width=max_value_length, placeholder="...")
        rprint(f"[bold cyan]{row['key']}[/bold cyan]: {row['description']}")
        rprint(f"  [green]{value_display}[/green] [yellow]({row['source']})[/yellow]")
        rprint()


def _get_config_schema() -> dict[str, dict[str, Any]]:
    """Available config options, read from GlobalConfig."""
    return {
        name: {
            "description": info.description or "No description available",
            "default": info.default,
            "type": info.annotation,
        }
        for name, info in GlobalConfig.model_fields.items()
    }


def _check_key_exists(key: str) -> dict[str, Any]:
    schema = _get_config_schema()

    if key not in schema:
        rprint(f"[red]Error:[/red] Unknown configuration key '{key}'\n")
        rprint("[bold]Available configuration options:[/bold]\n")
        display_config(
            [
                {
                    "key": name,
                    "description": info["description"],
                    "value": str(info["default"]),
                    "source": "Default",
                }
                for name, info in sorted(schema.items())
            ],
            max_value_length=80,
        )
        raise typer.Exit(1)

    return schema[key]


def _convert(value: str, target_type: Any) -> Any:
    # CLI values are strings; TOML keeps real types
    if target_type is bool:
        if value.lower() in ("true", "1", "yes", "on"):
            return True
        if value.lower() in ("false", "0", "no", "off"):
            return False
        raise typer.BadParameter(f"Expected a boolean, got '{value}'")
    if target_type is int:
        try:
            return int(value)
        except ValueError as e:
            raise typer.BadParameter(f"Expected an integer, got '{value}'") from e
    return value


def _toml_literal(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int):
        return str(value)
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _load(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        rprint(f"[yellow]Failed to parse existing config {path}: {e}[/yellow]")
        return {}


def _set_config(key: str, value: str, scope: str) -> None:
    field_info = _check_key_exists(key)
    final_value = _convert(value, field_info["type"])

    if scope == "env":
        env_var = f"{ENV_PREFIX}{key}"
        rprint("[green]To set this as an environment variable:[/green]")
        rprint(f"  Windows (PowerShell): $env:{env_var}='{value}'")
        rprint(f"  Windows (CMD): set {env_var}={value}")
        rprint(f"  Linux/macOS: export {env_var}='{value}'")
        return

    if scope == "global":
        config_path = global_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)
    else:
        config_path = Path(CONFIG_FILENAME)

    config_data = _load(config_path)
    config_data[key] = final_value

    with open(config_path, "w", encoding="utf-8") as f:
        for k, v in config_data.items():
            f.write(f"{k} = {_toml_literal(v)}\n")

    rprint(f"[green]Set {key} = {final_value} ({scope})[/green]")
    rprint(f"Config file: {config_path.absolute()}")


def _get_config(key: str | None, scope: str | None) -> None:
    schema = _get_config_schema()
    if key is not None:
        _check_key_exists(key)

    sources: list[tuple[str, dict]] = []
    if scope in (None, "local"):
        sources.append(("Local Config", _load(Path(CONFIG_FILENAME))))
    if scope in (None, "env"):
        sources.append(
            (
                "Environment",
                {
                    k[len(ENV_PREFIX) :].lower(): v
                    for k, v in os.environ.items()
                    if k.lower().startswith(ENV_PREFIX)
                },
            )
        )
    if scope in (None, "global"):
        sources.append(("Global Config", _load(global_config_path())))

    rows = []
    for name in [key] if key else sorted(schema):
        source_name, value = "Default", schema[name]["default"]
        for candidate_name, data in sources:
            if name in data:
                source_name, value = candidate_name, data[name]
                break
        rows.append(
            {
                "key": name,
                "description": schema[name]["description"],
                "value": str(value),
                "source": source_name,
            }
        )

    display_config(rows)


def main(
    ctx: typer.Context,
    key: str | None = typer.Argument(None, help="Configuration key to get or set."),
    value: str | None = typer.Argument(None, help="Value to set (omit to read)."),
    scope: ConfigScope | None = typer.Option(
        None,
        "--scope",
        help="Where to read from or write to: local, global or env. Writes default to local.",
    ),
) -> None:
    """
    Show or change sdk-migrator configuration.

    Examples:
        # Show every option and where its value comes from
        sdk-migrator config

        # Track a custom client wrapper type in this project
        sdk-migrator config client_type_pattern "\\bBillingClient\\b"
    """
    scope_name = scope.value if scope is not None else None
    if value is not None:
        _set_config(key, value, scope_name or "local")
    else:
        _get_config(key, scope_name)
