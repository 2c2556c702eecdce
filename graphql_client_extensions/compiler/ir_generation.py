# Copyright 2026-present Kensho Technologies, LLC.
"""Conversion of GraphQL documents into compiler IR.

Directives that change the structure of the response are lowered into IR nodes wrapping the
selection they are applied to:
    - @include(if: ...) and @skip(if: ...) become Condition nodes, with the first such directive
      producing the outermost Condition;
    - @defer on inline fragments and fragment spreads becomes a Defer node;
    - @stream on list fields becomes a Stream node;
    - @module on fragment spreads becomes a ModuleImport node.
All other directives are kept on the selection they were applied to.
"""
from typing import List, Optional, Sequence, Tuple

from graphql import (
    GraphQLCompositeType,
    GraphQLSchema,
    get_named_type,
    is_composite_type,
)
from graphql.language.ast import (
    DefinitionNode,
    DirectiveNode,
    DocumentNode,
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    InlineFragmentNode,
    OperationDefinitionNode,
    SelectionNode,
    SelectionSetNode,
)
from graphql.validation import NoUnusedFragmentsRule, specified_rules, validate

from ..ast_manipulation import (
    get_ast_field_name,
    get_directive_argument_value,
    get_directive_by_name,
    get_response_key,
    get_source_location,
    get_string_argument_value,
    remove_directives,
    safe_parse_graphql,
)
from ..exceptions import GraphQLValidationError
from ..schema import (
    DEFER_DIRECTIVE_NAME,
    INCLUDE_DIRECTIVE_NAME,
    MODULE_DIRECTIVE_NAME,
    SKIP_DIRECTIVE_NAME,
    STREAM_DIRECTIVE_NAME,
)
from .compiler_context import CompilerContext
from .helpers import get_field_definition, get_operation_root_type, is_list_field_type
from .ir import (
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
    Stream,
)


# Documents commonly define fragments that are only spread by other documents.
VALIDATION_RULES = tuple(rule for rule in specified_rules if rule is not NoUnusedFragmentsRule)

CONDITION_DIRECTIVE_NAMES = frozenset({INCLUDE_DIRECTIVE_NAME, SKIP_DIRECTIVE_NAME})


def _wrap_in_defer_if_needed(
    selection: Selection,
    defer_directive: Optional[DirectiveNode],
    document_name: str,
    default_label_suffix: str,
) -> Selection:
    """Return the selection wrapped in a Defer node if a @defer directive was applied to it."""
    if defer_directive is None:
        return selection

    label = get_string_argument_value(defer_directive, "label", GraphQLValidationError)
    if label is None:
        label = "{}$defer${}".format(document_name, default_label_suffix)
    return Defer(
        label=label,
        selections=(selection,),
        if_condition=get_directive_argument_value(defer_directive, "if"),
        loc=get_source_location(defer_directive),
    )


def _compile_field_ast(
    schema: GraphQLSchema,
    parent_type: GraphQLCompositeType,
    ast: FieldNode,
    directives: Sequence[DirectiveNode],
    document_name: str,
) -> Selection:
    """Return the IR for the field, wrapped in a Stream node if it is streamed."""
    field_name = get_ast_field_name(ast)
    field_definition = get_field_definition(schema, parent_type.name, field_name)
    if field_definition is None:
        raise AssertionError(
            "Field {} passed validation but was not present on type {}".format(
                field_name, parent_type
            )
        )

    stream_directive = get_directive_by_name(directives, STREAM_DIRECTIVE_NAME)
    field_type = field_definition.type
    named_field_type = get_named_type(field_type)
    location = get_source_location(ast)

    field: Selection
    if is_composite_type(named_field_type):
        field = LinkedField(
            name=field_name,
            type=field_type,
            selections=_compile_selections(
                schema, named_field_type, ast.selection_set, document_name
            ),
            alias=ast.alias.value if ast.alias is not None else None,
            arguments=tuple(ast.arguments or ()),
            directives=remove_directives(directives, {STREAM_DIRECTIVE_NAME}),
            loc=location,
        )
    else:
        field = ScalarField(
            name=field_name,
            type=field_type,
            alias=ast.alias.value if ast.alias is not None else None,
            arguments=tuple(ast.arguments or ()),
            directives=remove_directives(directives, {STREAM_DIRECTIVE_NAME}),
            loc=location,
        )

    if stream_directive is None:
        return field

    if not is_list_field_type(field_type):
        raise GraphQLValidationError(
            "The @stream directive can only be applied to list fields, but was applied to "
            "field {} of type {}.".format(field_name, field_type)
        )
    label = get_string_argument_value(stream_directive, "label", GraphQLValidationError)
    if label is None:
        label = "{}$stream${}".format(document_name, get_response_key(ast))
    return Stream(
        label=label,
        selections=(field,),
        initial_count=get_directive_argument_value(stream_directive, "initial_count"),
        if_condition=get_directive_argument_value(stream_directive, "if"),
        loc=get_source_location(stream_directive),
    )


def _compile_inline_fragment_ast(
    schema: GraphQLSchema,
    parent_type: GraphQLCompositeType,
    ast: InlineFragmentNode,
    directives: Sequence[DirectiveNode],
    document_name: str,
) -> Selection:
    """Return the IR for the inline fragment, wrapped in a Defer node if it is deferred."""
    if ast.type_condition is None:
        fragment_type = parent_type
    else:
        fragment_type = schema.get_type(ast.type_condition.name.value)

    inline_fragment = InlineFragment(
        type_condition=fragment_type,
        selections=_compile_selections(schema, fragment_type, ast.selection_set, document_name),
        directives=remove_directives(directives, {DEFER_DIRECTIVE_NAME}),
        loc=get_source_location(ast),
    )
    return _wrap_in_defer_if_needed(
        inline_fragment,
        get_directive_by_name(directives, DEFER_DIRECTIVE_NAME),
        document_name,
        fragment_type.name,
    )


def _compile_fragment_spread_ast(
    ast: FragmentSpreadNode, directives: Sequence[DirectiveNode], document_name: str
) -> Selection:
    """Return the IR for the fragment spread, wrapped in ModuleImport and Defer nodes if needed."""
    fragment_name = ast.name.value
    selection: Selection = FragmentSpread(
        name=fragment_name,
        directives=remove_directives(directives, {DEFER_DIRECTIVE_NAME, MODULE_DIRECTIVE_NAME}),
        loc=get_source_location(ast),
    )

    module_directive = get_directive_by_name(directives, MODULE_DIRECTIVE_NAME)
    if module_directive is not None:
        module_name = get_string_argument_value(module_directive, "name", GraphQLValidationError)
        if module_name is None:
            raise AssertionError(
                "The @module directive passed validation without its required name argument: "
                "{}".format(module_directive)
            )
        selection = ModuleImport(
            module=module_name,
            document_name=document_name,
            selections=(selection,),
            loc=get_source_location(module_directive),
        )

    return _wrap_in_defer_if_needed(
        selection,
        get_directive_by_name(directives, DEFER_DIRECTIVE_NAME),
        document_name,
        fragment_name,
    )


def _compile_selection_ast(
    schema: GraphQLSchema,
    parent_type: GraphQLCompositeType,
    ast: SelectionNode,
    document_name: str,
) -> Selection:
    """Return the IR for the selection, wrapped in one Condition node per @include and @skip."""
    condition_directives = [
        directive
        for directive in ast.directives or ()
        if directive.name.value in CONDITION_DIRECTIVE_NAMES
    ]
    directives = remove_directives(ast.directives, CONDITION_DIRECTIVE_NAMES)

    selection: Selection
    if isinstance(ast, FieldNode):
        selection = _compile_field_ast(schema, parent_type, ast, directives, document_name)
    elif isinstance(ast, InlineFragmentNode):
        selection = _compile_inline_fragment_ast(
            schema, parent_type, ast, directives, document_name
        )
    elif isinstance(ast, FragmentSpreadNode):
        selection = _compile_fragment_spread_ast(ast, directives, document_name)
    else:
        raise AssertionError("Unreachable code reached: unknown selection AST {}".format(ast))

    for directive in reversed(condition_directives):
        selection = Condition(
            condition=get_directive_argument_value(directive, "if"),
            passing_value=directive.name.value == INCLUDE_DIRECTIVE_NAME,
            selections=(selection,),
            loc=get_source_location(directive),
        )
    return selection


def _compile_selections(
    schema: GraphQLSchema,
    parent_type: GraphQLCompositeType,
    selection_set: Optional[SelectionSetNode],
    document_name: str,
) -> Tuple[Selection, ...]:
    """Return the IR for all the selections in the selection set, in order."""
    if selection_set is None:
        raise AssertionError(
            "Missing selections on a value of composite type {}, despite the query having "
            "passed validation.".format(parent_type)
        )
    return tuple(
        _compile_selection_ast(schema, parent_type, selection_ast, document_name)
        for selection_ast in selection_set.selections
    )


def _compile_definition_ast(schema: GraphQLSchema, ast: DefinitionNode) -> Definition:
    """Return the Root or Fragment IR for the given operation or fragment definition."""
    if isinstance(ast, OperationDefinitionNode):
        if ast.name is None:
            raise GraphQLValidationError(
                "All operations must be named, but found an anonymous {} "
                "operation.".format(ast.operation.value)
            )
        operation_name = ast.name.value
        root_type = get_operation_root_type(schema, ast.operation)
        if root_type is None:
            raise GraphQLValidationError(
                "Operation {} is a {}, but the schema does not support {} operations.".format(
                    operation_name, ast.operation.value, ast.operation.value
                )
            )
        return Root(
            name=operation_name,
            operation=ast.operation,
            type=root_type,
            selections=_compile_selections(schema, root_type, ast.selection_set, operation_name),
            variable_definitions=tuple(ast.variable_definitions or ()),
            directives=tuple(ast.directives or ()),
            loc=get_source_location(ast),
        )
    elif isinstance(ast, FragmentDefinitionNode):
        fragment_name = ast.name.value
        fragment_type = schema.get_type(ast.type_condition.name.value)
        return Fragment(
            name=fragment_name,
            type=fragment_type,
            selections=_compile_selections(
                schema, fragment_type, ast.selection_set, fragment_name
            ),
            variable_definitions=tuple(ast.variable_definitions or ()),
            directives=tuple(ast.directives or ()),
            loc=get_source_location(ast),
        )
    else:
        raise AssertionError(
            "Unreachable code reached: non-executable definition {} passed validation.".format(ast)
        )


def ast_to_ir(
    server_schema: GraphQLSchema,
    ast: DocumentNode,
    client_schema: Optional[GraphQLSchema] = None,
) -> CompilerContext:
    """Convert the given GraphQL document AST into compiler IR.

    Args:
        server_schema: schema of the remote execution engine
        ast: document containing any number of named operations and fragments
        client_schema: optional, server schema extended with client-only types and fields.
                       The document is validated against, and compiled using, this schema.
                       If omitted, the server schema is used.

    Returns:
        CompilerContext containing one Root or Fragment for every definition in the document,
        in document order

    Raises flavors of GraphQLError in the following cases:
        - if the document doesn't match the client schema (GraphQLValidationError);
        - if the document contains anonymous operations (GraphQLValidationError);
        - if the document uses a kind of operation the schema does not support
          (GraphQLValidationError);
        - if @stream is applied to a field that is not a list (GraphQLValidationError);
        - if two definitions share a name (DuplicateDefinitionError).
    """
    context = CompilerContext(server_schema, client_schema)

    validation_errors: List = validate(context.client_schema, ast, VALIDATION_RULES)
    if validation_errors:
        raise GraphQLValidationError("String does not validate: {}".format(validation_errors))

    return context.add_all(
        _compile_definition_ast(context.client_schema, definition_ast)
        for definition_ast in ast.definitions
    )


def graphql_to_ir(
    server_schema: GraphQLSchema,
    graphql_string: str,
    client_schema: Optional[GraphQLSchema] = None,
) -> CompilerContext:
    """Convert the given GraphQL document string into compiler IR.

    Args:
        server_schema: schema of the remote execution engine
        graphql_string: document containing any number of named operations and fragments
        client_schema: optional, server schema extended with client-only types and fields.
                       If omitted, the server schema is used.

    Returns:
        CompilerContext containing one Root or Fragment for every definition in the document

    Raises flavors of GraphQLError in the following cases:
        - if the document is invalid GraphQL (GraphQLParsingError);
        - all the cases listed in ast_to_ir().
    """
    ast = safe_parse_graphql(graphql_string)
    return ast_to_ir(server_schema, ast, client_schema=client_schema)
