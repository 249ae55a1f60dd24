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


"""
MigrationStrategy

A strategy rewrites one SourceUnit for one (language, typing mode) pair.

Responsibilities:
- Run its phases in order, each producing Matches
- Plan exactly one Edit per distinct Match
- Commit all edits once, or report that nothing changed

Implementations:
- PythonTypedStrategy: parameter, local, field and global bindings
- JavaTypedStrategy: parameter, local and field bindings
- PythonUntypedStrategy: closed service vocabulary, no bindings
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

from loguru import logger

from ..file_reader.file_parser import SourceUnit
from ..file_reader.language_mapper import Language
from ..syntax.edits import Edit, commit_edits, replace
from .models import Match, MigrationConfig, Span

Phase = Callable[[SourceUnit], list[Match]]


class MigrationStrategy(ABC):
    language: Language

    def __init__(self, config: MigrationConfig):
        self.config = config

    @abstractmethod
    def phases(self) -> list[tuple[str, Phase]]:
        """Named phases, in the order they run."""

    @abstractmethod
    def qualify(self, anchor_text: str) -> str:
        """Text of the binding root with the namespace qualifier appended."""

    def transform(self, source_unit: SourceUnit) -> str | None:
        """
        Rewrite every unqualified client call in `source_unit`.

        Returns:
            The new source text, or None when there was nothing to rewrite.

        Raises:
            OverlappingEditError: if two planned edits intersect
        """
        if source_unit.language is not self.language:
            raise ValueError(
                f"{type(self).__name__} cannot migrate {source_unit.language.value} sources"
            )

        matches: list[Match] = []
        for phase_name, phase in self.phases():
            phase_matches = phase(source_unit)
            logger.debug(
                "{file}: {phase} phase matched {count} call(s)",
                file=source_unit.display_name,
                phase=phase_name,
                count=len(phase_matches),
            )
            matches.extend(phase_matches)

        edits = [self.plan_edit(source_unit, match) for match in self.distinct(matches)]
        if not edits:
            return None

        return commit_edits(source_unit.content_bytes, edits)

    def plan_edit(self, source_unit: SourceUnit, match: Match) -> Edit:
        anchor_text = source_unit.text_of(match.anchor)
        return replace(match.anchor, self.qualify(anchor_text))

    @staticmethod
    def distinct(matches: list[Match]) -> list[Match]:
        # one rewrite per anchor, whichever binding resolved it
        seen: set[Span] = set()
        unique: list[Match] = []
        for match in matches:
            if match.anchor_span in seen:
                continue
            seen.add(match.anchor_span)
            unique.append(match)
        return unique
