# Copyright 2026-present Kensho Technologies, LLC.
from textwrap import dedent
import unittest

from graphql import OperationType, SourceLocation

from ..compiler.ir import (
    Condition,
    Defer,
    Fragment,
    FragmentSpread,
    InlineFragment,
    LinkedField,
    ModuleImport,
    Root,
    ScalarField,
    Stream,
)
from ..compiler.ir_generation import graphql_to_ir
from ..exceptions import (
    DuplicateDefinitionError,
    GraphQLParsingError,
    GraphQLValidationError,
)
from .test_helpers import compare_ir, get_schemas


class IrGenerationTests(unittest.TestCase):
    def setUp(self) -> None:
        """Initialize the test schemas once for all tests."""
        self.maxDiff = None
        self.server_schema, self.client_schema = get_schemas()

    def _compile(self, graphql_string: str):
        return graphql_to_ir(self.server_schema, graphql_string, client_schema=self.client_schema)

    def test_fields_and_definitions(self) -> None:
        context = self._compile(
            dedent(
                """\
                query ViewerQuery($size: Int) {
                  viewer {
                    handle: name
                    avatar(size: $size) {
                      uri
                    }
                    localBadge
                  }
                }

                fragment UserName on User {
                  name
                }
                """
            )
        )

        query, fragment = context.definitions
        self.assertIsInstance(query, Root)
        self.assertEqual(OperationType.QUERY, query.operation)
        self.assertIs(self.client_schema.query_type, query.type)
        self.assertIsInstance(fragment, Fragment)
        self.assertIs(self.client_schema.get_type("User"), fragment.type)

        (viewer,) = query.selections
        self.assertIsInstance(viewer, LinkedField)
        handle, avatar, badge = viewer.selections
        self.assertIsInstance(handle, ScalarField)
        self.assertEqual(("name", "handle"), (handle.name, handle.alias))
        self.assertIsInstance(avatar, LinkedField)
        self.assertEqual(1, len(avatar.arguments))
        self.assertIsInstance(badge, ScalarField)

        compare_ir(
            self,
            dedent(
                """\
                query ViewerQuery($size: Int) {
                  viewer {
                    handle: name
                    avatar(size: $size) {
                      uri
                    }
                    localBadge
                  }
                }
                """
            ),
            query,
        )

    def test_source_locations(self) -> None:
        context = self._compile("query ViewerQuery {\n  viewer {\n    name\n  }\n}\n")
        (query,) = context.definitions
        (viewer,) = query.selections
        (name,) = viewer.selections
        self.assertEqual(SourceLocation(1, 1), query.loc)
        self.assertEqual(SourceLocation(2, 3), viewer.loc)
        self.assertEqual(SourceLocation(3, 5), name.loc)

    def test_source_locations_after_blank_lines(self) -> None:
        context = self._compile(
            "query ViewerQuery {\n  viewer {\n    name\n  }\n}\n\n"
            "fragment UserName on User {\n\n  name\n}\n"
        )
        fragment = context.get_fragment("UserName")
        (name,) = fragment.selections
        self.assertEqual(SourceLocation(7, 1), fragment.loc)
        self.assertEqual(SourceLocation(9, 3), name.loc)

    def test_conditions_are_nested_in_directive_order(self) -> None:
        context = self._compile(
            dedent(
                """\
                query ViewerQuery($showName: Boolean!, $hideName: Boolean!) {
                  viewer {
                    name @include(if: $showName) @skip(if: $hideName)
                  }
                }
                """
            )
        )
        (query,) = context.definitions
        (viewer,) = query.selections
        (include_condition,) = viewer.selections
        self.assertIsInstance(include_condition, Condition)
        self.assertTrue(include_condition.passing_value)
        (skip_condition,) = include_condition.selections
        self.assertIsInstance(skip_condition, Condition)
        self.assertFalse(skip_condition.passing_value)
        (name,) = skip_condition.selections
        self.assertIsInstance(name, ScalarField)
        self.assertEqual((), name.directives)

        compare_ir(
            self,
            dedent(
                """\
                query ViewerQuery($showName: Boolean!, $hideName: Boolean!) {
                  viewer {
                    ... @include(if: $showName) {
                      ... @skip(if: $hideName) {
                        name
                      }
                    }
                  }
                }
                """
            ),
            query,
        )

    def test_inline_fragment_without_type_condition(self) -> None:
        context = self._compile(
            dedent(
                """\
                query ViewerQuery($showName: Boolean!) {
                  viewer {
                    ... @include(if: $showName) {
                      name
                    }
                  }
                }
                """
            )
        )
        (query,) = context.definitions
        (viewer,) = query.selections
        (condition,) = viewer.selections
        (inline_fragment,) = condition.selections
        self.assertIsInstance(inline_fragment, InlineFragment)
        self.assertIs(self.client_schema.get_type("User"), inline_fragment.type_condition)

    def test_defer_with_default_labels(self) -> None:
        context = self._compile(
            dedent(
                """\
                query ViewerQuery {
                  viewer {
                    ...UserName @defer
                    ... on User @defer {
                      id
                    }
                  }
                }

                fragment UserName on User {
                  name
                }
                """
            )
        )
        query = context.get_root("ViewerQuery")
        (viewer,) = query.selections
        spread_defer, inline_fragment_defer = viewer.selections

        self.assertIsInstance(spread_defer, Defer)
        self.assertEqual("ViewerQuery$defer$UserName", spread_defer.label)
        self.assertIsNone(spread_defer.if_condition)
        (spread,) = spread_defer.selections
        self.assertIsInstance(spread, FragmentSpread)
        self.assertEqual((), spread.directives)

        self.assertIsInstance(inline_fragment_defer, Defer)
        self.assertEqual("ViewerQuery$defer$User", inline_fragment_defer.label)
        (inline_fragment,) = inline_fragment_defer.selections
        self.assertIsInstance(inline_fragment, InlineFragment)
        self.assertEqual((), inline_fragment.directives)

    def test_defer_with_explicit_label_and_condition(self) -> None:
        context = self._compile(
            dedent(
                """\
                query ViewerQuery($shouldDefer: Boolean) {
                  viewer {
                    ...UserName @defer(label: "viewerName", if: $shouldDefer)
                  }
                }

                fragment UserName on User {
                  name
                }
                """
            )
        )
        (viewer,) = context.get_root("ViewerQuery").selections
        (defer,) = viewer.selections
        self.assertEqual("viewerName", defer.label)
        self.assertIsNotNone(defer.if_condition)

        compare_ir(
            self,
            dedent(
                """\
                viewer {
                  ... @defer(label: "viewerName", if: $shouldDefer) {
                    ...UserName
                  }
                }
                """
            ),
            viewer,
        )

    def test_non_string_label_is_rejected(self) -> None:
        with self.assertRaises(GraphQLValidationError):
            self._compile(
                dedent(
                    """\
                    query ViewerQuery($label: String) {
                      viewer {
                        ...UserName @defer(label: $label)
                      }
                    }

                    fragment UserName on User {
                      name
                    }
                    """
                )
            )

    def test_stream(self) -> None:
        context = self._compile(
            dedent(
                """\
                query ViewerQuery {
                  viewer {
                    friends(first: 10) @stream(initial_count: 1) {
                      id
                    }
                  }
                }
                """
            )
        )
        (query,) = context.definitions
        (viewer,) = query.selections
        (stream,) = viewer.selections
        self.assertIsInstance(stream, Stream)
        self.assertEqual("ViewerQuery$stream$friends", stream.label)
        self.assertEqual("1", stream.initial_count.value)
        (friends,) = stream.selections
        self.assertIsInstance(friends, LinkedField)
        self.assertEqual((), friends.directives)

    def test_stream_on_non_list_field(self) -> None:
        with self.assertRaises(GraphQLValidationError):
            self._compile(
                dedent(
                    """\
                    query ViewerQuery {
                      viewer {
                        bestFriend @stream {
                          id
                        }
                      }
                    }
                    """
                )
            )

    def test_module_import_within_defer(self) -> None:
        context = self._compile(
            dedent(
                """\
                query ViewerQuery {
                  viewer {
                    ...UserName @module(name: "UserName.react") @defer(label: "name")
                  }
                }

                fragment UserName on User {
                  name
                }
                """
            )
        )
        (viewer,) = context.get_root("ViewerQuery").selections
        (defer,) = viewer.selections
        self.assertIsInstance(defer, Defer)
        (module_import,) = defer.selections
        self.assertIsInstance(module_import, ModuleImport)
        self.assertEqual("UserName.react", module_import.module)
        self.assertEqual("ViewerQuery", module_import.document_name)
        (spread,) = module_import.selections
        self.assertEqual("UserName", spread.name)

    def test_mutation(self) -> None:
        context = self._compile(
            dedent(
                """\
                mutation RenameMutation($name: String!) {
                  updateName(name: $name) {
                    name
                  }
                }
                """
            )
        )
        (mutation,) = context.definitions
        self.assertEqual(OperationType.MUTATION, mutation.operation)
        self.assertIs(self.client_schema.mutation_type, mutation.type)

    def test_server_schema_is_used_without_client_schema(self) -> None:
        context = graphql_to_ir(self.server_schema, "query ViewerQuery { viewer { name } }")
        self.assertIs(self.server_schema, context.client_schema)
        with self.assertRaises(GraphQLValidationError):
            graphql_to_ir(self.server_schema, "query ViewerQuery { viewer { localBadge } }")


class IrGenerationErrorTests(unittest.TestCase):
    def setUp(self) -> None:
        """Initialize the test schemas once for all tests."""
        self.server_schema, self.client_schema = get_schemas()

    def _compile(self, graphql_string: str):
        return graphql_to_ir(self.server_schema, graphql_string, client_schema=self.client_schema)

    def test_invalid_graphql(self) -> None:
        with self.assertRaises(GraphQLParsingError):
            self._compile("query ViewerQuery { viewer { name }")

    def test_unknown_field(self) -> None:
        with self.assertRaises(GraphQLValidationError):
            self._compile("query ViewerQuery { viewer { ghost } }")

    def test_anonymous_operation(self) -> None:
        with self.assertRaises(GraphQLValidationError):
            self._compile("{ viewer { name } }")

    def test_unsupported_operation_type(self) -> None:
        with self.assertRaises(GraphQLValidationError):
            self._compile("subscription ViewerSubscription { viewer { name } }")

    def test_duplicate_definition_names(self) -> None:
        graphql_string = dedent(
            """\
            query Viewer {
              viewer {
                ...Viewer
              }
            }

            fragment Viewer on User {
              name
            }
            """
        )
        with self.assertRaises(DuplicateDefinitionError) as error_context:
            self._compile(graphql_string)
        self.assertEqual(
            [SourceLocation(1, 1), SourceLocation(7, 1)], error_context.exception.locations
        )
