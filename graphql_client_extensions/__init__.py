# Copyright 2026-present Kensho Technologies, LLC.
"""Commonly-used functions and data types from this package."""
from .compiler import (  # noqa
    ClientExtension,
    CompilerContext,
    Condition,
    Defer,
    Definition,
    Fragment,
    FragmentSpread,
    InlineFragment,
    LinkedField,
    ModuleImport,
    Root,
    ScalarField,
    Selection,
    SplitOperation,
    Stream,
    ast_to_ir,
    client_extensions_transform,
    graphql_to_ir,
    is_client_defined_field,
)
from .debugging_utils import print_ir  # noqa
from .exceptions import (  # noqa
    GraphQLError,
    GraphQLParsingError,
    GraphQLSchemaError,
    GraphQLUserError,
    GraphQLValidationError,
    InternalInconsistencyError,
    MissingTypeError,
    UnknownDefinitionError,
)
from .schema import DIRECTIVES, build_client_schema, build_schemas, build_server_schema  # noqa


__package_name__ = "graphql-client-extensions"
__version__ = "1.0.0"


def graphql_to_client_extension_ir(
    server_schema_text: str, client_extension_text: str, graphql_string: str
) -> CompilerContext:
    """Compile the GraphQL document into IR where client-only selections are grouped per level.

    Args:
        server_schema_text: SDL of the schema of the remote execution engine
        client_extension_text: SDL of the types and fields that only exist on the client,
                               as new types and "extend type" definitions
        graphql_string: document containing any number of named operations and fragments

    Returns:
        CompilerContext with one definition per operation and fragment in the document.
        The selections of every node in them are the selections the server can resolve,
        followed by at most one ClientExtension node containing all client-only selections.

    Raises flavors of GraphQLError in the following cases:
        - if the schemas or the document are invalid GraphQL (GraphQLParsingError);
        - if the schemas cannot be built (GraphQLSchemaError);
        - if the document doesn't match the schemas (GraphQLValidationError);
        - if the document and schemas are inconsistent with each other (GraphQLUserError).
    """
    server_schema, client_schema = build_schemas(server_schema_text, client_extension_text)
    context = graphql_to_ir(server_schema, graphql_string, client_schema=client_schema)
    return client_extensions_transform(context)
