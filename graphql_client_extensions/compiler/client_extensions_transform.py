# Copyright 2026-present Kensho Technologies, LLC.
"""Group the selections that only the client schema defines under ClientExtension nodes.

After this transform, the selections of every node are the selections the server can resolve,
in their original order, followed by at most one ClientExtension node holding all the client-only
selections of that node, also in their original order. Later stages use the ClientExtension nodes
to tell which parts of the response have to be filled in locally instead of fetched.

For example, if the client schema extends the server's User type with a "localBadge" field:
    query UserQuery {
      user {
        name
        localBadge
      }
    }
is transformed into:
    query UserQuery {
      user {
        name
        ... @__clientExtension {
          localBadge
        }
      }
    }
"""
from functools import partial
import logging
from typing import Callable, List, Sequence, Tuple, Union

from graphql import GraphQLNamedType, GraphQLType

from ..exceptions import InternalInconsistencyError, MissingTypeError
from .compiler_context import CompilerContext
from .helpers import strip_non_null_and_list_from_type
from .ir import (
    WRAPPER_SELECTION_TYPES,
    ClientExtension,
    Definition,
    FragmentSpread,
    InlineFragment,
    LinkedField,
    NodeT,
    ScalarField,
    Selection,
    with_selections,
)
from .schema_utils import (
    get_type_from_schemas,
    is_client_defined_field,
    is_client_only_type,
    resolve_named_type,
    resolve_root_type,
)


logger = logging.getLogger(__name__)


# Returns True if the field, selected on an object of the given type, is only known to the client.
ClientFieldPredicate = Callable[
    [Union[ScalarField, LinkedField], CompilerContext, GraphQLType], bool
]


def client_extensions_transform(
    context: CompilerContext, is_client_field: ClientFieldPredicate = is_client_defined_field
) -> CompilerContext:
    """Return a new context, where each level's client-only selections are in a ClientExtension.

    Args:
        context: compiler context with the definitions to transform, and the schemas
                 used to decide which selections are client-only
        is_client_field: optional, predicate deciding whether a field cannot be resolved by the
                         server for the given parent type. Inline fragments and fragment spreads
                         are client-only if their type is only defined by the client schema.

    Returns:
        new CompilerContext with every Root, Fragment and SplitOperation transformed

    Raises:
        - MissingTypeError if a definition's or inline fragment's type is defined by neither
          the server nor the client schema
        - UnknownDefinitionError if a fragment spread refers to a fragment not in the context
        - InternalInconsistencyError in the case of compiler bugs, e.g. a selection kind
          that this transform does not know about
    """
    return context.transform_definitions(
        partial(_transform_definition, context, is_client_field=is_client_field)
    )


def _transform_definition(
    context: CompilerContext, definition: Definition, is_client_field: ClientFieldPredicate
) -> Definition:
    """Return the definition with its client-only selections grouped at every level."""
    root_type = resolve_root_type(context, definition)
    logger.debug(
        "Grouping client-only selections of %(name)s, with root type %(type)s.",
        {"name": definition.name, "type": root_type.name},
    )
    return _transform_selections(definition, context, root_type, is_client_field)


def _transform_selections(
    node: NodeT,
    context: CompilerContext,
    parent_type: GraphQLNamedType,
    is_client_field: ClientFieldPredicate,
) -> NodeT:
    """Return a copy of the node with its own and all its descendants' selections regrouped."""
    server_selections, client_selections = partition_selections(
        node.selections, context, parent_type, is_client_field
    )
    return rebuild_node(node, server_selections, client_selections)


def partition_selections(
    selections: Sequence[Selection],
    context: CompilerContext,
    parent_type: GraphQLNamedType,
    is_client_field: ClientFieldPredicate = is_client_defined_field,
) -> Tuple[List[Selection], List[Selection]]:
    """Split the selections into the ones the server can resolve, and the client-only ones.

    Server-resolvable selections that have selections of their own are transformed recursively
    before being returned. Client-only selections are returned unchanged: once a field or
    fragment is known to be client-only, all the data it selects is client-only as well.

    Args:
        selections: the selections of a single node, in order
        context: compiler context containing the schemas and all fragment definitions
        parent_type: type of the object the selections are made on
        is_client_field: optional, predicate deciding whether a field is client-only

    Returns:
        tuple (server selections, client-only selections), each preserving the relative
        order of the input selections
    """
    server_selections: List[Selection] = []
    client_selections: List[Selection] = []

    for selection in selections:
        if isinstance(selection, ClientExtension):
            # Already grouped, by an earlier run of this transform.
            server_selections.append(selection)
        elif isinstance(selection, WRAPPER_SELECTION_TYPES):
            server_selections.append(
                _transform_selections(selection, context, parent_type, is_client_field)
            )
        elif isinstance(selection, ScalarField):
            if is_client_field(selection, context, parent_type):
                client_selections.append(selection)
            else:
                server_selections.append(selection)
        elif isinstance(selection, LinkedField):
            if is_client_field(selection, context, parent_type):
                client_selections.append(selection)
            else:
                field_type = resolve_named_type(
                    context,
                    strip_non_null_and_list_from_type(selection.type).name,
                    "field `{}`".format(selection.name),
                    selection.loc,
                )
                server_selections.append(
                    _transform_selections(selection, context, field_type, is_client_field)
                )
        elif isinstance(selection, InlineFragment):
            type_name = selection.type_condition.name
            if is_client_only_type(context, type_name):
                client_selections.append(selection)
            else:
                fragment_type = get_type_from_schemas(context, type_name)
                if fragment_type is None:
                    raise MissingTypeError(
                        "Expected the type `{}` of an inline fragment to have been defined in "
                        "the schema. Make sure both the server and the client schema are up to "
                        "date.".format(type_name),
                        [selection.loc],
                    )
                server_selections.append(
                    _transform_selections(selection, context, fragment_type, is_client_field)
                )
        elif isinstance(selection, FragmentSpread):
            # The spread fragment is transformed separately, as a definition of its own.
            fragment = context.get_fragment(selection.name)
            if is_client_only_type(context, fragment.type.name):
                client_selections.append(selection)
            else:
                server_selections.append(selection)
        else:
            raise InternalInconsistencyError(
                "Unexpected selection of kind `{}`.".format(type(selection).__name__),
                [getattr(selection, "loc", None)],
            )

    return server_selections, client_selections


def rebuild_node(
    node: NodeT, server_selections: Sequence[Selection], client_selections: Sequence[Selection]
) -> NodeT:
    """Return a copy of the node whose selections are the given ones.

    If there are any client-only selections, they are all grouped under a single new
    ClientExtension node, placed after all the server selections.
    """
    if not client_selections:
        return with_selections(node, server_selections)

    client_extension = ClientExtension(selections=tuple(client_selections), loc=node.loc)
    return with_selections(node, list(server_selections) + [client_extension])
