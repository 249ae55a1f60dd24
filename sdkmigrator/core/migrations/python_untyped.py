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
v1-namespace migration for Python code without type annotations.

Without annotations there are no bindings to follow, so any call whose
receiver chain walks through a known service accessor is treated as a client
call:

    client.customers.list()                       -> client.v1.customers.list()
    stripe_client.accounts.capabilities.retrieve() -> stripe_client.v1.accounts...
    client.v2.core.accounts.list()                -> unchanged

This is a heuristic. Any object exposing an attribute with a service name
(e.g. `report.events.list()`) is rewritten as well, so results must be
reviewed.
"""

from loguru import logger

from ..file_reader.file_parser import SourceUnit
from ..file_reader.language_mapper import Language
from ..syntax.predicates import find_all, kind
from .call_sites import ReceiverChain, build_call_site, python_receiver_chain
from .models import Match
from .strategy import MigrationStrategy, Phase


class PythonUntypedStrategy(MigrationStrategy):
    language = Language.PYTHON

    def phases(self) -> list[tuple[str, Phase]]:
        return [("service vocabulary", self.vocabulary_matches)]

    def qualify(self, anchor_text: str) -> str:
        return f"{anchor_text}.{self.config.qualifier}"

    def service_index(self, chain: ReceiverChain) -> int | None:
        """Position of the first service segment that is followed by a member."""
        for index in range(1, len(chain.segments) - 1):
            if chain.segments[index] in self.config.service_names:
                return index
        return None

    def vocabulary_matches(self, unit: SourceUnit) -> list[Match]:
        matches = []
        for call in find_all(unit.root_node, kind("call")):
            chain = python_receiver_chain(call)
            if chain is None:
                continue
            # module-level API (stripe.checkout.Session.create) is not a client
            if chain.root == self.config.library_module:
                continue
            if self.config.is_versioned(chain.segments):
                continue

            index = self.service_index(chain)
            if index is None:
                continue

            call_site = build_call_site(unit, call, chain)
            logger.debug(
                "{file}:{line}: heuristic match on '{service}' in {text}",
                file=unit.display_name,
                line=call.start_point[0] + 1,
                service=chain.segments[index],
                text=call_site.raw_text,
            )
            matches.append(Match(call_site, None, chain.prefixes[index - 1]))

        if matches:
            logger.debug(
                f"{unit.display_name}: {len(matches)} untyped match(es); receivers were "
                "not checked, review for calls on unrelated objects"
            )
        return matches
