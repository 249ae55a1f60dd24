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
v1-namespace migration for Java.

Service accessors are methods in Java, so the qualifier is inserted as a
call: `client.customers().list()` becomes `client.v1().customers().list()`.
"""

from loguru import logger
from tree_sitter import Node

from ..file_reader.file_parser import SourceUnit
from ..file_reader.language_mapper import Language
from ..syntax.predicates import (
    Predicate,
    field,
    find_all,
    has,
    inside,
    kind,
    node_text,
    text_is,
    text_matches,
    walk,
)
from .call_sites import ReceiverChain, build_call_site, java_receiver_chain
from .models import Binding, BindingKind, Match, MigrationConfig, Span
from .strategy import MigrationStrategy, Phase

METHOD_KINDS = kind("method_declaration", "constructor_declaration")
CLASS_BODIES = kind("class_body")
LOCAL_DECLARATOR = kind("variable_declarator") & inside(kind("local_variable_declaration"))
INFERRED_TYPE = "var"


def formal_parameter_names(method: Node) -> set[str]:
    params = method.child_by_field_name("parameters")
    if params is None:
        return set()
    names = set()
    for param in params.named_children:
        if param.type == "formal_parameter":
            name_node = param.child_by_field_name("name")
        elif param.type == "spread_parameter":
            declarator = next(
                (c for c in param.named_children if c.type == "variable_declarator"), None
            )
            name_node = declarator.child_by_field_name("name") if declarator else None
        else:
            name_node = None
        if name_node is not None:
            names.add(node_text(name_node))
    return names


def lambda_parameter_names(lambda_expression: Node) -> set[str]:
    params = lambda_expression.child_by_field_name("parameters")
    if params is None:
        return set()
    if params.type == "identifier":
        return {node_text(params)}
    names = set()
    for param in params.named_children:
        if param.type == "identifier":
            names.add(node_text(param))
        elif param.type == "formal_parameter":
            name_node = param.child_by_field_name("name")
            if name_node is not None:
                names.add(node_text(name_node))
    return names


def declared_local_names(body: Node | None) -> set[str]:
    """Locals, loop variables, resources, catch parameters and lambda parameters."""
    if body is None:
        return set()
    names = set()
    for node in walk(body, prune=CLASS_BODIES):
        if LOCAL_DECLARATOR(node):
            names.add(node_text(node.child_by_field_name("name")))
        elif node.type in ("enhanced_for_statement", "catch_formal_parameter", "resource"):
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                names.add(node_text(name_node))
        elif node.type == "lambda_expression":
            names |= lambda_parameter_names(node)
    return names


def field_names(class_body: Node) -> set[str]:
    names = set()
    for member in class_body.named_children:
        if member.type != "field_declaration":
            continue
        for declarator in member.children_by_field_name("declarator"):
            names.add(node_text(declarator.child_by_field_name("name")))
    return names


def redeclares(name: str) -> Predicate:
    """A nested method, lambda or class body in which `name` is rebound."""

    def test(node: Node) -> bool:
        if node.type in ("method_declaration", "constructor_declaration"):
            return name in formal_parameter_names(node) or name in declared_local_names(
                node.child_by_field_name("body")
            )
        if node.type == "lambda_expression":
            return name in lambda_parameter_names(node)
        if node.type == "class_body":
            return name in field_names(node)
        return False

    return Predicate(test, f"redeclares {name}")


class JavaTypedStrategy(MigrationStrategy):
    """Binding-scoped v1-namespace rewrite for Java."""

    language = Language.JAVA

    def __init__(self, config: MigrationConfig):
        super().__init__(config)
        pattern = config.client_type_pattern

        self.tracked_type = kind("type_identifier", "scoped_type_identifier") & text_matches(
            pattern
        )
        self.tracked_construction = kind("object_creation_expression") & field(
            "type", self.tracked_type
        )

    def phases(self) -> list[tuple[str, Phase]]:
        return [
            ("parameter", self.parameter_matches),
            ("local", self.local_matches),
            ("field", self.field_matches),
        ]

    def qualify(self, anchor_text: str) -> str:
        return f"{anchor_text}.{self.config.qualifier}()"

    # -------------------------------------------------------------------------
    # Binding Locator
    # -------------------------------------------------------------------------

    def parameter_bindings(self, unit: SourceUnit) -> list[Binding]:
        bindings = []
        for method in find_all(unit.root_node, METHOD_KINDS):
            body = method.child_by_field_name("body")
            params = method.child_by_field_name("parameters")
            if body is None or params is None:
                continue
            for param in params.named_children:
                if param.type != "formal_parameter":
                    continue
                if not self.tracked_type(param.child_by_field_name("type")):
                    continue
                name_node = param.child_by_field_name("name")
                bindings.append(
                    Binding(node_text(name_node), BindingKind.PARAMETER, body, Span.of(param))
                )
        return bindings

    def declared_clients(self, declaration: Node) -> list[Node]:
        """Declarators of a local or field declaration that hold a client."""
        type_node = declaration.child_by_field_name("type")
        declarators = declaration.children_by_field_name("declarator")
        if self.tracked_type(type_node):
            return declarators
        if type_node is not None and node_text(type_node) == INFERRED_TYPE:
            return [
                d for d in declarators if self.tracked_construction(d.child_by_field_name("value"))
            ]
        return []

    def local_bindings(self, unit: SourceUnit) -> list[Binding]:
        bindings: dict[tuple, Binding] = {}
        for method in find_all(unit.root_node, METHOD_KINDS):
            body = method.child_by_field_name("body")
            if body is None:
                continue
            declarations = find_all(
                body, kind("local_variable_declaration"), prune=CLASS_BODIES
            )
            for declaration in declarations:
                for declarator in self.declared_clients(declaration):
                    binding = Binding(
                        node_text(declarator.child_by_field_name("name")),
                        BindingKind.LOCAL,
                        body,
                        Span.of(declaration),
                    )
                    bindings.setdefault(binding.identity, binding)
        return list(bindings.values())

    def field_bindings(self, class_body: Node) -> list[Binding]:
        bindings = []
        for member in class_body.named_children:
            if member.type != "field_declaration":
                continue
            for declarator in self.declared_clients(member):
                bindings.append(
                    Binding(
                        node_text(declarator.child_by_field_name("name")),
                        BindingKind.FIELD,
                        class_body,
                        Span.of(member),
                    )
                )
        return bindings

    # -------------------------------------------------------------------------
    # Shadow Filter
    # -------------------------------------------------------------------------

    def methods_using_field(self, name: str, class_body: Node) -> list[Node]:
        """
        Members of `class_body` in which `name` denotes the field.

        Constructors are kept unless one of their parameters is called `name`.
        Methods must mention the name and must not declare it as a parameter
        or local.
        """
        mentions = has(kind("identifier") & text_is(name), stop_by_end=True)

        selected = []
        for member in class_body.named_children:
            if member.type == "constructor_declaration":
                if name in formal_parameter_names(member):
                    logger.debug(f"Skipping constructor: parameter shadows field '{name}'")
                    continue
                selected.append(member)
            elif member.type == "method_declaration":
                if not mentions(member):
                    continue
                body = member.child_by_field_name("body")
                if name in formal_parameter_names(member) or name in declared_local_names(body):
                    method_name = node_text(member.child_by_field_name("name"))
                    logger.debug(f"Skipping {method_name}: ambiguous shadowing of field '{name}'")
                    continue
                selected.append(member)
        return selected

    # -------------------------------------------------------------------------
    # Call-Site Matcher
    # -------------------------------------------------------------------------

    def resolves_to(self, chain: ReceiverChain, binding: Binding) -> bool:
        if chain.root == binding.name and len(chain.segments) == 2:
            return True
        # this.client.customers() only ever means the field
        return (
            binding.kind is BindingKind.FIELD
            and chain.root == "this"
            and chain.segments[1] == binding.name
        )

    def matches_in(self, unit: SourceUnit, binding: Binding, scope: Node) -> list[Match]:
        matches = []
        invocations = find_all(
            scope, kind("method_invocation"), prune=redeclares(binding.name)
        )
        for invocation in invocations:
            chain = java_receiver_chain(invocation)
            if chain is None or not self.resolves_to(chain, binding):
                continue
            if self.config.is_versioned(chain.segments):
                continue
            anchor = invocation.child_by_field_name("object")
            matches.append(Match(build_call_site(unit, invocation, chain), binding, anchor))
        return matches

    # -------------------------------------------------------------------------
    # Phases
    # -------------------------------------------------------------------------

    def parameter_matches(self, unit: SourceUnit) -> list[Match]:
        matches = []
        for binding in self.parameter_bindings(unit):
            matches.extend(self.matches_in(unit, binding, binding.scope))
        return matches

    def local_matches(self, unit: SourceUnit) -> list[Match]:
        matches = []
        for binding in self.local_bindings(unit):
            matches.extend(self.matches_in(unit, binding, binding.scope))
        return matches

    def field_matches(self, unit: SourceUnit) -> list[Match]:
        matches = []
        for class_body in find_all(unit.root_node, CLASS_BODIES):
            for binding in self.field_bindings(class_body):
                for member in self.methods_using_field(binding.name, class_body):
                    body = member.child_by_field_name("body")
                    if body is not None:
                        matches.extend(self.matches_in(unit, binding, body))
        return matches
