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

from ..exceptions import unsupported_variant
from ..file_reader.language_mapper import Language
from .java_typed import JavaTypedStrategy
from .models import MigrationConfig
from .python_typed import PythonTypedStrategy
from .python_untyped import PythonUntypedStrategy
from .strategy import MigrationStrategy


class Migration(str, Enum):
    V1_NAMESPACE = "v1-namespace"


class TypingMode(str, Enum):
    TYPED = "typed"
    UNTYPED = "untyped"


def select_strategy(
    migration: Migration,
    language: Language,
    typing_mode: TypingMode,
    config: MigrationConfig,
) -> MigrationStrategy:
    """
    Build the strategy for one migration variant.

    Raises:
        ConfigurationError: if the combination has no implementation
    """
    if migration is Migration.V1_NAMESPACE:
        if typing_mode is TypingMode.TYPED:
            if language is Language.PYTHON:
                return PythonTypedStrategy(config)
            if language is Language.JAVA:
                return JavaTypedStrategy(config)
        elif language is Language.PYTHON:
            return PythonUntypedStrategy(config)

    raise unsupported_variant(migration.value, language.value, typing_mode.value)
