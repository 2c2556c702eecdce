# Copyright 2026-present Kensho Technologies, LLC.
"""Common helper methods for working with GraphQL schema types."""
from typing import Any, Optional

from graphql import (
    GraphQLField,
    GraphQLInterfaceType,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLSchema,
    GraphQLType,
    OperationType,
    SchemaMetaFieldDef,
    TypeMetaFieldDef,
    TypeNameMetaFieldDef,
    is_composite_type,
)


SCHEMA_META_FIELD_NAME = "__schema"
TYPE_META_FIELD_NAME = "__type"
TYPENAME_META_FIELD_NAME = "__typename"


def strip_non_null_from_type(graphql_type: GraphQLType) -> Any:
    """Return the GraphQL type stripped of its GraphQLNonNull annotations."""
    while isinstance(graphql_type, GraphQLNonNull):
        graphql_type = graphql_type.of_type
    return graphql_type


def strip_non_null_and_list_from_type(graphql_type: GraphQLType) -> Any:
    """Return the GraphQL type stripped of its GraphQLNonNull and GraphQLList annotations."""
    while isinstance(graphql_type, (GraphQLNonNull, GraphQLList)):
        graphql_type = graphql_type.of_type
    return graphql_type


def is_list_field_type(graphql_type: GraphQLType) -> bool:
    """Return True if the field type is a (possibly non-null) list, and False otherwise."""
    return isinstance(strip_non_null_from_type(graphql_type), GraphQLList)


# Unlike graphql-core's own field lookup, this works on type names rather than type objects,
# since the same type name maps to distinct type objects in the server and client schemas.
def get_field_definition(
    schema: GraphQLSchema, parent_type_name: str, field_name: str
) -> Optional[GraphQLField]:
    """Return the definition of the field on the named type in the schema, or None if missing."""
    parent_type = schema.get_type(parent_type_name)
    if parent_type is None:
        return None

    if field_name == TYPENAME_META_FIELD_NAME:
        return TypeNameMetaFieldDef if is_composite_type(parent_type) else None
    if field_name in (SCHEMA_META_FIELD_NAME, TYPE_META_FIELD_NAME):
        if schema.query_type is not parent_type:
            return None
        return SchemaMetaFieldDef if field_name == SCHEMA_META_FIELD_NAME else TypeMetaFieldDef
    if isinstance(parent_type, (GraphQLObjectType, GraphQLInterfaceType)):
        return parent_type.fields.get(field_name)

    return None


def get_operation_root_type(
    schema: GraphQLSchema, operation: OperationType
) -> Optional[GraphQLObjectType]:
    """Return the schema's root type for the given kind of operation, or None if it has none."""
    if operation == OperationType.QUERY:
        return schema.query_type
    elif operation == OperationType.MUTATION:
        return schema.mutation_type
    elif operation == OperationType.SUBSCRIPTION:
        return schema.subscription_type
    else:
        raise AssertionError("Unreachable code reached: unknown operation {}".format(operation))
