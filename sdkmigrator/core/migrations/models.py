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


import re
from dataclasses import dataclass, field
from enum import Enum

from tree_sitter import Node

from ..exceptions import invalid_type_pattern
from .service_names import SERVICE_NAMES

DEFAULT_CLIENT_TYPE_PATTERN = r"\bStripeClient\b"
DEFAULT_LIBRARY_MODULE = "stripe"


class BindingKind(str, Enum):
    PARAMETER = "parameter"
    LOCAL = "local"
    FIELD = "field"
    GLOBAL = "global"


@dataclass(frozen=True)
class Span:
    start_byte: int
    end_byte: int

    @classmethod
    def of(cls, node: Node) -> "Span":
        return cls(node.start_byte, node.end_byte)

    def contains(self, other: "Span") -> bool:
        return self.start_byte <= other.start_byte and other.end_byte <= self.end_byte


@dataclass(frozen=True)
class Binding:
    """A name bound to a client value, searched for inside `scope`."""

    name: str
    kind: BindingKind
    scope: Node = field(compare=False, hash=False)
    declaration_site: Span

    @property
    def identity(self) -> tuple[str, Span]:
        return (self.name, Span.of(self.scope))


@dataclass(frozen=True)
class CallSite:
    span: Span
    receiver_chain: tuple[str, ...]
    invoked_member: str
    raw_text: str


@dataclass(frozen=True)
class Match:
    """
    A call site resolved to a binding.

    `anchor` is the node covering the binding root of the receiver chain;
    the qualifier is inserted right after it.
    """

    call_site: CallSite
    binding: Binding | None
    anchor: Node = field(compare=False, hash=False)

    @property
    def anchor_span(self) -> Span:
        return Span.of(self.anchor)


@dataclass(frozen=True)
class MigrationConfig:
    """Read-only settings shared by every strategy for one run."""

    client_type_pattern: re.Pattern = re.compile(DEFAULT_CLIENT_TYPE_PATTERN)
    library_module: str = DEFAULT_LIBRARY_MODULE
    qualifier: str = "v1"
    versioned_qualifiers: frozenset[str] = frozenset({"v1", "v2"})
    service_names: frozenset[str] = SERVICE_NAMES
    field_receivers: frozenset[str] = frozenset({"self", "cls"})

    @classmethod
    def from_settings(
        cls,
        client_type_pattern: str | None = None,
        library_module: str | None = None,
    ) -> "MigrationConfig":
        pattern_source = client_type_pattern or DEFAULT_CLIENT_TYPE_PATTERN
        try:
            pattern = re.compile(pattern_source)
        except re.error as e:
            raise invalid_type_pattern(pattern_source, str(e)) from e

        return cls(
            client_type_pattern=pattern,
            library_module=library_module or DEFAULT_LIBRARY_MODULE,
        )

    def is_versioned(self, segments: tuple[str, ...] | list[str]) -> bool:
        return any(segment in self.versioned_qualifiers for segment in segments)
