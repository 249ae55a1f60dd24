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


from enum import Enum
from pathlib import Path


class Language(str, Enum):
    """Source languages with a migration grammar."""

    PYTHON = "python"
    JAVA = "java"

    @property
    def globs(self) -> tuple[str, ...]:
        return LANGUAGE_GLOBS[self]

    @property
    def tree_sitter_name(self) -> str:
        return self.value


LANGUAGE_GLOBS: dict[Language, tuple[str, ...]] = {
    Language.PYTHON: ("**/*.py",),
    Language.JAVA: ("**/*.java",),
}

EXTENSION_MAPPING: dict[str, Language] = {
    ".py": Language.PYTHON,
    ".pyi": Language.PYTHON,
    ".java": Language.JAVA,
}


def detect_language(file_path: str | Path) -> Language | None:
    """
    Map a file extension to a migration language.

    Returns None when the extension belongs to no supported language.
    """
    suffix = Path(file_path).suffix.lower()
    return EXTENSION_MAPPING.get(suffix)
