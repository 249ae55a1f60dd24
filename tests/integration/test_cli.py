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


import tomllib

from .conftest import run_cli

TYPED_SOURCE = """\
import stripe


class Billing:
    def __init__(self):
        self.client = stripe.StripeClient("sk_test")

    def customers(self):
        return self.client.customers.list()
"""

UNTYPED_SOURCE = """\
def sync(client):
    return client.customers.list()
"""


class TestCli:
    def test_help(self, workspace):
        result = run_cli(["--help"])
        assert result.exit_code == 0
        assert "migrate" in result.output
        assert "config" in result.output

    def test_no_command_prints_help(self, workspace):
        result = run_cli([])
        assert result.exit_code == 0
        assert "migrate" in result.output

    def test_version(self, workspace):
        result = run_cli(["--version"])
        assert result.exit_code == 0
        assert "sdk-migrator version" in result.output


class TestMigrate:
    def test_dry_run_does_not_modify_files(self, workspace):
        source = workspace / "billing.py"
        source.write_text(TYPED_SOURCE, encoding="utf-8")

        result = run_cli(["migrate", "-d", ".", "-l", "python", "-m", "v1-namespace"])

        assert result.exit_code == 0
        assert "Will migrate file:" in result.output
        assert "Dry run complete." in result.output
        assert source.read_text(encoding="utf-8") == TYPED_SOURCE

    def test_execute_rewrites_files(self, workspace):
        source = workspace / "billing.py"
        source.write_text(TYPED_SOURCE, encoding="utf-8")

        result = run_cli(
            ["migrate", "-d", str(workspace), "-l", "python", "-m", "v1-namespace", "-x"]
        )

        assert result.exit_code == 0
        assert "Migration complete." in result.output
        assert "return self.client.v1.customers.list()" in source.read_text(encoding="utf-8")

    def test_untyped_mode(self, workspace):
        source = workspace / "sync.py"
        source.write_text(UNTYPED_SOURCE, encoding="utf-8")

        result = run_cli(
            ["migrate", "-d", ".", "-l", "python", "-m", "v1-namespace", "--untyped", "--execute"]
        )

        assert result.exit_code == 0
        assert "client.v1.customers.list()" in source.read_text(encoding="utf-8")

    def test_language_is_case_insensitive(self, workspace):
        (workspace / "Billing.java").write_text(
            "class Billing { void run(StripeClient c) { c.customers().list(); } }\n",
            encoding="utf-8",
        )

        result = run_cli(["migrate", "-d", ".", "-l", "JAVA", "-m", "v1-namespace", "-x"])

        assert result.exit_code == 0
        assert "c.v1().customers().list();" in (workspace / "Billing.java").read_text(
            encoding="utf-8"
        )

    def test_unsupported_variant_exits_with_error(self, workspace):
        result = run_cli(["migrate", "-d", ".", "-l", "java", "-m", "v1-namespace", "-u"])

        assert result.exit_code == 1
        assert 'No migration called "v1-namespace" found for "java"' in result.output

    def test_unknown_language_is_a_usage_error(self, workspace):
        result = run_cli(["migrate", "-d", ".", "-l", "cobol", "-m", "v1-namespace"])

        assert result.exit_code == 2

    def test_missing_directory_exits_with_error(self, workspace):
        result = run_cli(["migrate", "-d", "missing", "-l", "python", "-m", "v1-namespace"])

        assert result.exit_code == 1
        assert "Directory not found: missing" in result.output

    def test_failed_file_sets_exit_code(self, workspace):
        (workspace / "good.py").write_text(TYPED_SOURCE, encoding="utf-8")
        (workspace / "bad.py").write_text("def bad(:\n", encoding="utf-8")

        result = run_cli(["migrate", "-d", ".", "-l", "python", "-m", "v1-namespace", "-x"])

        assert result.exit_code == 1
        assert "self.client.v1.customers" in (workspace / "good.py").read_text(encoding="utf-8")
        assert (workspace / "bad.py").read_text(encoding="utf-8") == "def bad(:\n"

    def test_client_type_pattern_option(self, workspace):
        source = workspace / "acme.py"
        source.write_text(
            "def run(client: AcmeClient):\n    return client.customers.list()\n",
            encoding="utf-8",
        )

        result = run_cli(
            [
                "--client-type-pattern",
                r"\bAcmeClient\b",
                "migrate",
                "-d",
                ".",
                "-l",
                "python",
                "-m",
                "v1-namespace",
                "-x",
            ]
        )

        assert result.exit_code == 0
        assert "client.v1.customers.list()" in source.read_text(encoding="utf-8")

    def test_invalid_client_type_pattern(self, workspace):
        result = run_cli(
            [
                "--client-type-pattern",
                "(",
                "migrate",
                "-d",
                ".",
                "-l",
                "python",
                "-m",
                "v1-namespace",
            ]
        )

        assert result.exit_code == 1


class TestConfig:
    def test_list_config(self, workspace):
        result = run_cli(["config"])

        assert result.exit_code == 0
        assert "client_type_pattern" in result.output
        assert "library_module" in result.output

    def test_set_local_config(self, workspace):
        result = run_cli(["config", "client_type_pattern", r"\bAcmeClient\b"])

        assert result.exit_code == 0
        with open(workspace / "sdkmigratorconfig.toml", "rb") as f:
            assert tomllib.load(f) == {"client_type_pattern": r"\bAcmeClient\b"}

    def test_set_global_config(self, workspace, tmp_path):
        result = run_cli(["config", "jobs", "4", "--scope", "global"])

        assert result.exit_code == 0
        with open(tmp_path / "user_config" / "sdkmigratorconfig.toml", "rb") as f:
            assert tomllib.load(f) == {"jobs": 4}

    def test_unknown_key(self, workspace):
        result = run_cli(["config", "model", "gpt"])

        assert result.exit_code == 1
        assert "Unknown configuration key 'model'" in result.output

    def test_local_config_is_used_by_migrate(self, workspace):
        source = workspace / "acme.py"
        source.write_text(
            "def run(client: AcmeClient):\n    return client.customers.list()\n",
            encoding="utf-8",
        )
        run_cli(["config", "client_type_pattern", r"\bAcmeClient\b"])

        result = run_cli(["migrate", "-d", ".", "-l", "python", "-m", "v1-namespace", "-x"])

        assert result.exit_code == 0
        assert "client.v1.customers.list()" in source.read_text(encoding="utf-8")
