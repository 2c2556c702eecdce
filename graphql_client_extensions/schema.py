# Copyright 2026-present Kensho Technologies, LLC.
from typing import Optional, Tuple

from graphql import (
    DirectiveLocation,
    GraphQLArgument,
    GraphQLBoolean,
    GraphQLDirective,
    GraphQLError as CoreGraphQLError,
    GraphQLInt,
    GraphQLNonNull,
    GraphQLSchema,
    GraphQLString,
    build_ast_schema,
    extend_schema,
)
from graphql.type.directives import specified_directives

from .ast_manipulation import safe_parse_graphql
from .exceptions import GraphQLSchemaError


# Constraints:
# - can only be applied to inline fragments and fragment spreads;
# - 'label' must be unique within the document; a label is generated if it is omitted.
DeferDirective = GraphQLDirective(
    name="defer",
    args={
        "label": GraphQLArgument(
            type_=GraphQLString,
            description="Unique name identifying the deferred payload in the response.",
        ),
        "if": GraphQLArgument(
            type_=GraphQLBoolean,
            description="Deferral only happens when this argument is true or omitted.",
        ),
    },
    locations=[
        DirectiveLocation.FRAGMENT_SPREAD,
        DirectiveLocation.INLINE_FRAGMENT,
    ],
)


# Constraints:
# - can only be applied to list-valued fields;
# - 'label' must be unique within the document; a label is generated if it is omitted.
StreamDirective = GraphQLDirective(
    name="stream",
    args={
        "label": GraphQLArgument(
            type_=GraphQLString,
            description="Unique name identifying the streamed payloads in the response.",
        ),
        "initial_count": GraphQLArgument(
            type_=GraphQLInt,
            description="Number of list items returned before streaming starts.",
        ),
        "if": GraphQLArgument(
            type_=GraphQLBoolean,
            description="Streaming only happens when this argument is true or omitted.",
        ),
    },
    locations=[
        DirectiveLocation.FIELD,
    ],
)


# Constraints:
# - can only be applied to fragment spreads;
# - 'name' is the name of the module that renders the data selected by the fragment.
ModuleDirective = GraphQLDirective(
    name="module",
    args={
        "name": GraphQLArgument(
            type_=GraphQLNonNull(GraphQLString),
            description="Name of the module that consumes the fragment's data.",
        ),
    },
    locations=[
        DirectiveLocation.FRAGMENT_SPREAD,
    ],
)


DIRECTIVES = (DeferDirective, StreamDirective, ModuleDirective)

DEFER_DIRECTIVE_NAME = DeferDirective.name
STREAM_DIRECTIVE_NAME = StreamDirective.name
MODULE_DIRECTIVE_NAME = ModuleDirective.name
INCLUDE_DIRECTIVE_NAME = "include"
SKIP_DIRECTIVE_NAME = "skip"


def insert_directives_into_existing_schema(schema: GraphQLSchema) -> GraphQLSchema:
    """Return a copy of the schema that also declares any of DIRECTIVES it did not declare."""
    existing_directive_names = {directive.name for directive in schema.directives}
    missing_directives = [
        directive for directive in DIRECTIVES if directive.name not in existing_directive_names
    ]
    if not missing_directives:
        return schema

    schema_kwargs = schema.to_kwargs()
    schema_kwargs["directives"] = tuple(schema.directives or specified_directives) + tuple(
        missing_directives
    )
    return GraphQLSchema(**schema_kwargs)


def build_server_schema(schema_text: str) -> GraphQLSchema:
    """Build the schema of the remote execution engine from its SDL text.

    Args:
        schema_text: SDL describing the types and fields the server is able to resolve

    Returns:
        GraphQLSchema that declares the @defer, @stream and @module directives in addition
        to the directives in the schema text

    Raises:
        - GraphQLParsingError if the schema text is not valid GraphQL
        - GraphQLSchemaError if the schema text does not describe a valid schema
    """
    schema_ast = safe_parse_graphql(schema_text)
    try:
        schema = build_ast_schema(schema_ast)
    except (TypeError, CoreGraphQLError) as e:
        raise GraphQLSchemaError("Could not build the server schema: {}".format(e)) from e
    return insert_directives_into_existing_schema(schema)


def build_client_schema(server_schema: GraphQLSchema, extension_text: str) -> GraphQLSchema:
    """Extend the server schema with the types and fields only known to the client.

    Args:
        server_schema: schema of the remote execution engine
        extension_text: SDL containing new types and "extend type" definitions. Anything it
                        defines cannot be fetched from the server and must be filled in locally.

    Returns:
        GraphQLSchema containing every type and field of the server schema, plus the extensions

    Raises:
        - GraphQLParsingError if the extension text is not valid GraphQL
        - GraphQLSchemaError if the extension is not valid for the server schema
    """
    extension_ast = safe_parse_graphql(extension_text)
    try:
        return extend_schema(server_schema, extension_ast)
    except (TypeError, CoreGraphQLError) as e:
        raise GraphQLSchemaError(
            "Could not apply the client schema extension: {}".format(e)
        ) from e


def build_schemas(
    schema_text: str, extension_text: Optional[str] = None
) -> Tuple[GraphQLSchema, GraphQLSchema]:
    """Return the (server schema, client schema) pair described by the given SDL texts.

    If no client extension is given, the client schema is the server schema itself.
    """
    server_schema = build_server_schema(schema_text)
    if extension_text is None:
        return server_schema, server_schema
    return server_schema, build_client_schema(server_schema, extension_text)

