# Copyright 2026-present Kensho Technologies, LLC.
from typing import Iterable, List, Union

from graphql import print_ast
from graphql.language.ast import Node

from .compiler.ir import (
    ClientExtension,
    Condition,
    Defer,
    Fragment,
    FragmentSpread,
    InlineFragment,
    IRNode,
    LinkedField,
    ModuleImport,
    Root,
    ScalarField,
    Selection,
    SplitOperation,
    Stream,
)


INDENT = "  "

# Not a real directive: marks the selections grouped by the client extensions transform.
CLIENT_EXTENSION_MARKER = "@__clientExtension"


def _print_nodes(nodes: Iterable[Node], separator: str) -> str:
    return separator.join(print_ast(node) for node in nodes)


def _print_arguments(argument_pairs: Iterable[str]) -> str:
    arguments = list(argument_pairs)
    return "({})".format(", ".join(arguments)) if arguments else ""


def _print_field_head(field: Union[ScalarField, LinkedField]) -> str:
    """Return the alias, name, arguments and directives of a field, as in GraphQL syntax."""
    parts = []
    if field.alias is not None:
        parts.append("{}: ".format(field.alias))
    parts.append(field.name)
    parts.append(_print_arguments(print_ast(argument) for argument in field.arguments))
    if field.directives:
        parts.append(" " + _print_nodes(field.directives, " "))
    return "".join(parts)


def _print_selection_head(selection: Selection) -> str:
    """Return the text before the opening brace of a selection's selection set."""
    if isinstance(selection, LinkedField):
        return _print_field_head(selection)
    elif isinstance(selection, InlineFragment):
        head = "... on {}".format(selection.type_condition.name)
        if selection.directives:
            head += " " + _print_nodes(selection.directives, " ")
        return head
    elif isinstance(selection, Condition):
        directive_name = "include" if selection.passing_value else "skip"
        return "... @{}(if: {})".format(directive_name, print_ast(selection.condition))
    elif isinstance(selection, Defer):
        arguments = ['label: "{}"'.format(selection.label)]
        if selection.if_condition is not None:
            arguments.append("if: {}".format(print_ast(selection.if_condition)))
        return "... @defer{}".format(_print_arguments(arguments))
    elif isinstance(selection, Stream):
        arguments = ['label: "{}"'.format(selection.label)]
        if selection.initial_count is not None:
            arguments.append("initial_count: {}".format(print_ast(selection.initial_count)))
        if selection.if_condition is not None:
            arguments.append("if: {}".format(print_ast(selection.if_condition)))
        return "... @stream{}".format(_print_arguments(arguments))
    elif isinstance(selection, ModuleImport):
        return '... @module(name: "{}")'.format(selection.module)
    elif isinstance(selection, ClientExtension):
        return "... {}".format(CLIENT_EXTENSION_MARKER)
    else:
        raise AssertionError("Unable to print IR node: {}".format(selection))


def _print_selection_lines(selection: Selection, depth: int) -> List[str]:
    indent = INDENT * depth
    if isinstance(selection, ScalarField):
        return [indent + _print_field_head(selection)]
    elif isinstance(selection, FragmentSpread):
        line = "{}...{}".format(indent, selection.name)
        if selection.directives:
            line += " " + _print_nodes(selection.directives, " ")
        return [line]

    lines = ["{}{} {{".format(indent, _print_selection_head(selection))]
    for child_selection in selection.selections:
        lines.extend(_print_selection_lines(child_selection, depth + 1))
    lines.append(indent + "}")
    return lines


def _print_definition_head(node: IRNode) -> str:
    """Return the text before the opening brace of a definition's selection set."""
    if isinstance(node, Root):
        head = "{} {}".format(node.operation.value, node.name)
        if node.variable_definitions:
            head += "({})".format(_print_nodes(node.variable_definitions, ", "))
        if node.directives:
            head += " " + _print_nodes(node.directives, " ")
    elif isinstance(node, Fragment):
        head = "fragment {} on {}".format(node.name, node.type.name)
        if node.directives:
            head += " " + _print_nodes(node.directives, " ")
    elif isinstance(node, SplitOperation):
        head = "SplitOperation {} on {}".format(node.name, node.type.name)
    else:
        raise AssertionError("Unable to print IR node: {}".format(node))
    return head


def print_ir(node: IRNode) -> str:
    """Return a GraphQL-like, human-readable representation of the IR definition or selection.

    Wrapper selections are printed as inline fragments without type condition, carrying the
    directive they were created from. ClientExtension nodes are printed in the same way,
    with the "@__clientExtension" marker as directive.
    """
    if isinstance(node, Selection):
        lines = _print_selection_lines(node, 0)
    else:
        lines = ["{} {{".format(_print_definition_head(node))]
        for selection in node.selections:
            lines.extend(_print_selection_lines(selection, 1))
        lines.append("}")
    return "\n".join(lines) + "\n"
