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
v1-namespace migration for type-annotated Python code.

Limitations:
1. Subclasses or wrappers of the client with unrelated names are not found.
2. The client library is assumed to be imported under its conventional name
   (`import stripe`); aliased imports are not recognised.
"""

from loguru import logger
from tree_sitter import Node

from ..file_reader.file_parser import SourceUnit
from ..file_reader.language_mapper import Language
from ..syntax.predicates import (
    Predicate,
    any_,
    field,
    find_all,
    has,
    kind,
    node_text,
    text_is,
    text_matches,
    walk,
)
from .call_sites import build_call_site, python_receiver_chain
from .models import Binding, BindingKind, Match, MigrationConfig, Span
from .strategy import MigrationStrategy, Phase

COMPREHENSION_KINDS = frozenset(
    {
        "list_comprehension",
        "set_comprehension",
        "dictionary_comprehension",
        "generator_expression",
    }
)
NESTED_SCOPES = kind(
    "function_definition", "lambda", "class_definition", *COMPREHENSION_KINDS
)
PATTERN_KINDS = frozenset(
    {
        "pattern_list",
        "tuple_pattern",
        "list_pattern",
        "expression_list",
        "tuple",
        "list",
        "parenthesized_expression",
        "list_splat_pattern",
        "as_pattern_target",
    }
)
CONSTRUCTOR_NAMES = frozenset({"__init__"})


def parameter_name(param: Node) -> Node | None:
    """Identifier declared by one entry of a parameter list."""
    if param.type == "identifier":
        return param
    if param.type in ("default_parameter", "typed_default_parameter"):
        return param.child_by_field_name("name")
    if param.type in ("typed_parameter", "list_splat_pattern", "dictionary_splat_pattern"):
        first = param.named_children[0] if param.named_children else None
        if first is None:
            return None
        if first.type == "identifier":
            return first
        return parameter_name(first)
    return None


def parameter_names(scope: Node) -> set[str]:
    params = scope.child_by_field_name("parameters")
    if params is None:
        return set()
    names = set()
    for param in params.named_children:
        name_node = parameter_name(param)
        if name_node is not None:
            names.add(node_text(name_node))
    return names


def target_names(target: Node | None) -> set[str]:
    """Names bound by an assignment target, ignoring attributes and subscripts."""
    if target is None:
        return set()
    if target.type == "identifier":
        return {node_text(target)}
    if target.type in PATTERN_KINDS:
        names = set()
        for child in target.named_children:
            names |= target_names(child)
        return names
    return set()


def local_names(body: Node | None) -> set[str]:
    """Names a function body binds locally, not counting nested scopes' own locals."""
    if body is None:
        return set()

    names: set[str] = set()
    stack = list(body.named_children)
    while stack:
        node = stack.pop()
        if node.type in ("function_definition", "class_definition"):
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                names.add(node_text(name_node))
            continue
        if node.type == "lambda":
            continue
        if node.type in ("assignment", "augmented_assignment"):
            names |= target_names(node.child_by_field_name("left"))
        elif node.type == "for_statement":
            names |= target_names(node.child_by_field_name("left"))
        elif node.type == "named_expression":
            names |= target_names(node.child_by_field_name("name"))
        elif node.type == "as_pattern":
            names |= target_names(node.child_by_field_name("alias"))
        stack.extend(node.named_children)
    return names


def declares_outer(body: Node | None, name: str) -> bool:
    """The body opts into an outer binding with `global name` or `nonlocal name`."""
    if body is None:
        return False
    outer_statement = kind("global_statement", "nonlocal_statement") & has(
        kind("identifier") & text_is(name)
    )
    for node in walk(body, prune=NESTED_SCOPES):
        if outer_statement(node):
            return True
    return False


def class_level_names(class_def: Node) -> set[str]:
    body = class_def.child_by_field_name("body")
    if body is None:
        return set()
    names = set()
    for statement in body.named_children:
        if statement.type == "expression_statement":
            for child in statement.named_children:
                if child.type == "assignment":
                    names |= target_names(child.child_by_field_name("left"))
        elif statement.type in ("function_definition", "class_definition"):
            name_node = statement.child_by_field_name("name")
            if name_node is not None:
                names.add(node_text(name_node))
    return names


def comprehension_targets(comprehension: Node) -> set[str]:
    """Names bound by the `for` clauses of a comprehension or generator expression."""
    names = set()
    for clause in comprehension.named_children:
        if clause.type == "for_in_clause":
            for target in clause.children_by_field_name("left"):
                names |= target_names(target)
    return names


def redeclares(name: str) -> Predicate:
    """
    A nested scope in which `name` no longer refers to the outer binding.

    Functions and lambdas shadow by parameter or local assignment unless they
    declare the name global/nonlocal. Comprehensions shadow through their `for`
    targets; the whole comprehension is skipped, including its outermost
    iterable. Class bodies that assign the name are excluded outright.
    """

    def test(node: Node) -> bool:
        if node.type in ("function_definition", "lambda"):
            body = node.child_by_field_name("body")
            shadows = name in parameter_names(node) or name in local_names(body)
            return shadows and not declares_outer(body, name)
        if node.type in COMPREHENSION_KINDS:
            return name in comprehension_targets(node)
        if node.type == "class_definition":
            return name in class_level_names(node)
        return False

    return Predicate(test, f"redeclares {name}")


def class_methods(body: Node) -> list[Node]:
    methods = []
    for member in body.named_children:
        if member.type == "decorated_definition":
            member = member.child_by_field_name("definition")
        if member is not None and member.type == "function_definition":
            methods.append(member)
    return methods


class PythonTypedStrategy(MigrationStrategy):
    """Binding-scoped v1-namespace rewrite for Python with type annotations."""

    language = Language.PYTHON

    def __init__(self, config: MigrationConfig):
        super().__init__(config)
        pattern = config.client_type_pattern

        self.tracked_type = kind("type") & text_matches(pattern)
        self.tracked_constructor = kind("call") & field(
            "function",
            any_(
                kind("identifier") & text_matches(pattern),
                kind("attribute")
                & field("object", kind("identifier") & text_is(config.library_module))
                & field("attribute", text_matches(pattern)),
            ),
        )

    def phases(self) -> list[tuple[str, Phase]]:
        return [
            ("parameter", self.parameter_matches),
            ("local", self.local_matches),
            ("field", self.field_matches),
            ("global", self.global_matches),
        ]

    def qualify(self, anchor_text: str) -> str:
        return f"{anchor_text}.{self.config.qualifier}"

    # -------------------------------------------------------------------------
    # Binding Locator
    # -------------------------------------------------------------------------

    def assigns_client(self, assignment: Node) -> bool:
        """`x: StripeClient = ...` or `x = StripeClient(...)`."""
        return self.tracked_type(
            assignment.child_by_field_name("type")
        ) or self.tracked_constructor(assignment.child_by_field_name("right"))

    def tracked_parameters(self, function: Node) -> list[Node]:
        params = function.child_by_field_name("parameters")
        if params is None:
            return []
        tracked = []
        for param in params.named_children:
            if param.type not in ("typed_parameter", "typed_default_parameter"):
                continue
            if param.type == "typed_parameter" and param.named_children[0].type != "identifier":
                continue
            if not self.tracked_type(param.child_by_field_name("type")):
                continue
            name_node = parameter_name(param)
            if name_node is not None and name_node.type == "identifier":
                tracked.append(name_node)
        return tracked

    def parameter_bindings(self, unit: SourceUnit) -> list[Binding]:
        bindings = []
        for function in find_all(unit.root_node, kind("function_definition")):
            body = function.child_by_field_name("body")
            if body is None:
                continue
            for name_node in self.tracked_parameters(function):
                bindings.append(
                    Binding(
                        node_text(name_node),
                        BindingKind.PARAMETER,
                        body,
                        Span.of(name_node.parent),
                    )
                )
        return bindings

    def local_bindings(self, unit: SourceUnit) -> list[Binding]:
        bindings: dict[tuple, Binding] = {}
        for function in find_all(unit.root_node, kind("function_definition")):
            body = function.child_by_field_name("body")
            if body is None:
                continue
            for assignment in find_all(body, kind("assignment"), prune=NESTED_SCOPES):
                left = assignment.child_by_field_name("left")
                if left is None or left.type != "identifier":
                    continue
                if not self.assigns_client(assignment):
                    continue
                binding = Binding(
                    node_text(left), BindingKind.LOCAL, body, Span.of(assignment)
                )
                bindings.setdefault(binding.identity, binding)
        return list(bindings.values())

    def global_bindings(self, unit: SourceUnit) -> list[Binding]:
        root = unit.root_node
        bindings: dict[tuple, Binding] = {}
        for assignment in find_all(root, kind("assignment"), prune=NESTED_SCOPES):
            left = assignment.child_by_field_name("left")
            if left is None or left.type != "identifier":
                continue
            if not self.assigns_client(assignment):
                continue
            binding = Binding(node_text(left), BindingKind.GLOBAL, root, Span.of(assignment))
            bindings.setdefault(binding.identity, binding)
        return list(bindings.values())

    def field_declarations(self, class_body: Node) -> dict[str, Node]:
        """Field names holding a client, mapped to their first declaration."""
        fields: dict[str, Node] = {}

        for statement in class_body.named_children:
            if statement.type != "expression_statement":
                continue
            for assignment in statement.named_children:
                if assignment.type != "assignment":
                    continue
                left = assignment.child_by_field_name("left")
                if left is None or left.type != "identifier":
                    continue
                if self.assigns_client(assignment):
                    fields.setdefault(node_text(left), assignment)

        receiver = kind("identifier") & any_(*(text_is(r) for r in self.config.field_receivers))
        for method in class_methods(class_body):
            body = method.child_by_field_name("body")
            if body is None:
                continue
            tracked_params = {node_text(n) for n in self.tracked_parameters(method)}
            for assignment in find_all(body, kind("assignment"), prune=NESTED_SCOPES):
                left = assignment.child_by_field_name("left")
                if left is None or left.type != "attribute":
                    continue
                if not receiver(left.child_by_field_name("object")):
                    continue
                right = assignment.child_by_field_name("right")
                from_param = (
                    right is not None
                    and right.type == "identifier"
                    and node_text(right) in tracked_params
                )
                if from_param or self.assigns_client(assignment):
                    attribute = left.child_by_field_name("attribute")
                    fields.setdefault(node_text(attribute), assignment)

        return fields

    # -------------------------------------------------------------------------
    # Shadow Filter
    # -------------------------------------------------------------------------

    def methods_using_field(self, name: str, class_body: Node) -> list[Node]:
        """
        Methods in which `self.<name>` denotes the field.

        Constructors are kept unless a parameter shadows the name; any other
        method must reference the field and must not redeclare the name.
        """
        receivers = self.config.field_receivers
        references = has(
            kind("attribute")
            & field("object", kind("identifier") & any_(*(text_is(r) for r in receivers)))
            & field("attribute", text_is(name)),
            stop_by_end=True,
        )

        selected = []
        for method in class_methods(class_body):
            method_name = node_text(method.child_by_field_name("name"))
            params = parameter_names(method)

            if method_name in CONSTRUCTOR_NAMES:
                if name in params:
                    logger.debug(f"Skipping {method_name}: parameter shadows field '{name}'")
                    continue
                selected.append(method)
                continue

            if not references(method):
                continue
            if name in params or name in local_names(method.child_by_field_name("body")):
                logger.debug(f"Skipping {method_name}: ambiguous shadowing of field '{name}'")
                continue
            selected.append(method)
        return selected

    # -------------------------------------------------------------------------
    # Call-Site Matcher
    # -------------------------------------------------------------------------

    def rooted_matches(self, unit: SourceUnit, binding: Binding) -> list[Match]:
        """Calls inside the binding's scope whose receiver chain starts at its name."""
        matches = []
        for call in find_all(binding.scope, kind("call"), prune=redeclares(binding.name)):
            chain = python_receiver_chain(call)
            if chain is None or chain.root != binding.name:
                continue
            if self.config.is_versioned(chain.segments):
                continue
            matches.append(Match(build_call_site(unit, call, chain), binding, chain.prefixes[0]))
        return matches

    def field_matches_in(self, unit: SourceUnit, binding: Binding, method: Node) -> list[Match]:
        body = method.child_by_field_name("body")
        if body is None:
            return []
        matches = []
        # a nested class has its own self; nested functions keep it unless rebound
        other_receiver = any_(
            kind("class_definition"), *(redeclares(r) for r in self.config.field_receivers)
        )
        for call in find_all(body, kind("call"), prune=other_receiver):
            chain = python_receiver_chain(call)
            if chain is None or len(chain.segments) < 3:
                continue
            if chain.root not in self.config.field_receivers or chain.segments[1] != binding.name:
                continue
            if self.config.is_versioned(chain.segments):
                continue
            matches.append(Match(build_call_site(unit, call, chain), binding, chain.prefixes[1]))
        return matches

    # -------------------------------------------------------------------------
    # Phases
    # -------------------------------------------------------------------------

    def parameter_matches(self, unit: SourceUnit) -> list[Match]:
        matches = []
        for binding in self.parameter_bindings(unit):
            matches.extend(self.rooted_matches(unit, binding))
        return matches

    def local_matches(self, unit: SourceUnit) -> list[Match]:
        matches = []
        for binding in self.local_bindings(unit):
            matches.extend(self.rooted_matches(unit, binding))
        return matches

    def field_matches(self, unit: SourceUnit) -> list[Match]:
        matches = []
        for class_def in find_all(unit.root_node, kind("class_definition")):
            body = class_def.child_by_field_name("body")
            if body is None:
                continue
            for name, declaration in self.field_declarations(body).items():
                binding = Binding(name, BindingKind.FIELD, body, Span.of(declaration))
                for method in self.methods_using_field(name, body):
                    matches.extend(self.field_matches_in(unit, binding, method))
        return matches

    def global_matches(self, unit: SourceUnit) -> list[Match]:
        matches = []
        for binding in self.global_bindings(unit):
            matches.extend(self.rooted_matches(unit, binding))
        return matches
