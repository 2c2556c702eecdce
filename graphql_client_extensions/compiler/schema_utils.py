# Copyright 2026-present Kensho Technologies, LLC.
"""Type lookups across the server schema and the client schema extension.

The same type name maps to distinct type objects in the server schema and in the client schema,
so all lookups here are done by name. Types and fields present in the server schema can be
fetched from the server; the ones only present in the client schema have to be filled in locally.
"""
from typing import Optional, Union

from graphql import GraphQLNamedType, GraphQLType, SourceLocation

from ..exceptions import InternalInconsistencyError, MissingTypeError
from .compiler_context import CompilerContext
from .helpers import (
    get_field_definition,
    get_operation_root_type,
    strip_non_null_and_list_from_type,
)
from .ir import Definition, Fragment, LinkedField, Root, ScalarField, SplitOperation


def get_type_from_schemas(context: CompilerContext, type_name: str) -> Optional[GraphQLNamedType]:
    """Return the named type from the server schema if it has one, else from the client schema."""
    server_type = context.server_schema.get_type(type_name)
    if server_type is not None:
        return server_type
    return context.client_schema.get_type(type_name)


def is_client_only_type(context: CompilerContext, type_name: str) -> bool:
    """Return True if only the client schema defines a type with the given name."""
    return (
        context.server_schema.get_type(type_name) is None
        and context.client_schema.get_type(type_name) is not None
    )


def resolve_root_type(context: CompilerContext, definition: Definition) -> GraphQLNamedType:
    """Return the type that the top-level selections of the definition are made on.

    Operations always start at the server schema's root types, and split operations are
    always fetched from the server, so their types are looked up in the server schema only.
    Fragments may be defined on client-only types.

    Args:
        context: compiler context containing the server and client schemas
        definition: Root, Fragment or SplitOperation whose type to look up

    Returns:
        the named type of the definition

    Raises:
        MissingTypeError if the type cannot be found. This means that the document being
        compiled does not match the schemas, which is a user error.
    """
    root_type: Optional[GraphQLNamedType]
    if isinstance(definition, Root):
        root_type = get_operation_root_type(context.server_schema, definition.operation)
    elif isinstance(definition, SplitOperation):
        root_type = context.server_schema.get_type(definition.type.name)
    elif isinstance(definition, Fragment):
        root_type = get_type_from_schemas(context, definition.type.name)
    else:
        raise AssertionError(
            "Unreachable code reached: unknown definition kind {}".format(
                type(definition).__name__
            )
        )

    if root_type is None:
        raise MissingTypeError(
            "Expected the type of `{}` to have been defined in the schema. Make sure both "
            "the server and the client schema are up to date.".format(definition.name),
            [definition.loc],
        )
    return root_type


def resolve_named_type(
    context: CompilerContext,
    type_name: str,
    description: str,
    loc: Optional[SourceLocation] = None,
) -> GraphQLNamedType:
    """Return the named type from either schema, for a selection already known to be resolvable.

    Args:
        context: compiler context containing the server and client schemas
        type_name: name of the type to look up
        description: human-readable description of what the type belongs to, for error messages
        loc: optional, location of the selection the type belongs to, for error messages

    Returns:
        the named type, preferring the server schema's version of it

    Raises:
        InternalInconsistencyError if neither schema defines the type. Callers only
        use this function for selections that passed validation, so this is a compiler bug.
    """
    named_type = get_type_from_schemas(context, type_name)
    if named_type is None:
        raise InternalInconsistencyError(
            "Expected to be able to determine the type `{}` of {}.".format(type_name, description),
            [loc],
        )
    return named_type


def is_client_defined_field(
    field: Union[ScalarField, LinkedField],
    context: CompilerContext,
    parent_type: GraphQLType,
) -> bool:
    """Return True if the field is only defined by the client schema extension for the parent type.

    Such fields cannot be fetched from the server: either the parent type itself is a client-only
    type, or the client schema extends a server type with the field. Fields that neither schema
    defines are left on the server side, for the server to reject.
    """
    parent_type_name = strip_non_null_and_list_from_type(parent_type).name
    if get_field_definition(context.server_schema, parent_type_name, field.name) is not None:
        return False
    return get_field_definition(context.client_schema, parent_type_name, field.name) is not None
