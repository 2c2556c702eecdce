# Copyright 2026-present Kensho Technologies, LLC.
from typing import AbstractSet, Iterable, Optional, Tuple, Type

import funcy
from graphql import SourceLocation, print_ast
from graphql.error import GraphQLSyntaxError
from graphql.language.ast import (
    DirectiveNode,
    DocumentNode,
    FieldNode,
    Node,
    StringValueNode,
    ValueNode,
)
from graphql.language.parser import parse

from .exceptions import GraphQLParsingError


def get_ast_field_name(ast: FieldNode) -> str:
    """Return the field name for the given AST node."""
    return ast.name.value


def get_response_key(ast: FieldNode) -> str:
    """Return the key under which the field's value appears in the response, i.e. alias or name."""
    return ast.alias.value if ast.alias is not None else get_ast_field_name(ast)


def get_source_location(ast: Optional[Node]) -> Optional[SourceLocation]:
    """Return the line and column at which the AST node starts, or None if it is not known."""
    if ast is None or ast.loc is None or ast.loc.start_token is None:
        return None
    start_token = ast.loc.start_token
    return SourceLocation(start_token.line, start_token.column)


def safe_parse_graphql(graphql_string: str) -> DocumentNode:
    """Return an AST representation of the given GraphQL input, reraising GraphQL library errors."""
    try:
        ast = parse(graphql_string)
    except GraphQLSyntaxError as e:
        raise GraphQLParsingError(e) from e

    return ast


def get_directive_by_name(
    directives: Optional[Iterable[DirectiveNode]], directive_name: str
) -> Optional[DirectiveNode]:
    """Return the first directive with the given name, or None if there is no such directive."""
    return funcy.first(
        directive for directive in directives or () if directive.name.value == directive_name
    )


def remove_directives(
    directives: Optional[Iterable[DirectiveNode]], directive_names: AbstractSet[str]
) -> Tuple[DirectiveNode, ...]:
    """Return the directives whose names are not among the given names, preserving their order."""
    return tuple(
        funcy.lremove(lambda directive: directive.name.value in directive_names, directives or ())
    )


def get_directive_argument_value(
    directive: DirectiveNode, argument_name: str
) -> Optional[ValueNode]:
    """Return the AST value of the directive's argument with the given name, if it was supplied."""
    argument = funcy.first(
        argument for argument in directive.arguments or () if argument.name.value == argument_name
    )
    if argument is None:
        return None
    return argument.value


def get_string_argument_value(
    directive: DirectiveNode, argument_name: str, desired_error_type: Type[Exception]
) -> Optional[str]:
    """Return the value of a directive argument that must be a string literal, if supplied."""
    value = get_directive_argument_value(directive, argument_name)
    if value is None:
        return None
    if not isinstance(value, StringValueNode):
        raise desired_error_type(
            "Expected argument {} of directive @{} to be a string literal, "
            "but found: {}".format(argument_name, directive.name.value, print_ast(value))
        )
    return value.value

