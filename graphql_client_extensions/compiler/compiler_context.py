# Copyright 2026-present Kensho Technologies, LLC.
"""Immutable collection of compiled definitions, together with the schemas they were built for."""
from collections import OrderedDict
import logging
from typing import Callable, Iterable, Optional, Tuple

from graphql import GraphQLSchema

from ..exceptions import DuplicateDefinitionError, UnknownDefinitionError
from .ir import DEFINITION_TYPES, Definition, Fragment, Root


logger = logging.getLogger(__name__)


# Returns the replacement for the given definition, or None to remove it from the context.
DefinitionTransformFn = Callable[[Definition], Optional[Definition]]


class CompilerContext(object):
    """The definitions of a compilation run, and the server and client schemas they refer to.

    The server schema describes what the remote execution engine is able to resolve.
    The client schema is the server schema extended with types and fields that only exist
    locally. CompilerContext objects are never modified: every operation that changes
    the set of definitions returns a new CompilerContext.
    """

    __slots__ = ("_server_schema", "_client_schema", "_definitions")

    def __init__(
        self,
        server_schema: GraphQLSchema,
        client_schema: Optional[GraphQLSchema] = None,
        definitions: Iterable[Definition] = (),
    ) -> None:
        """Construct a new CompilerContext.

        Args:
            server_schema: schema of the remote execution engine
            client_schema: optional, server schema extended with client-only types and fields.
                           If omitted, the server schema is used, i.e. nothing is client-only.
            definitions: Root, Fragment and SplitOperation objects. Names must be unique.

        Returns:
            new CompilerContext object
        """
        self._server_schema = server_schema
        self._client_schema = client_schema if client_schema is not None else server_schema

        self._definitions: "OrderedDict[str, Definition]" = OrderedDict()
        for definition in definitions:
            if not isinstance(definition, DEFINITION_TYPES):
                raise AssertionError(
                    "Expected a Root, Fragment or SplitOperation definition, "
                    "but received: {}".format(definition)
                )
            existing_definition = self._definitions.get(definition.name)
            if existing_definition is not None:
                raise DuplicateDefinitionError(
                    "Found multiple definitions named `{}`. Definition names must be "
                    "unique.".format(definition.name),
                    [existing_definition.loc, definition.loc],
                )
            self._definitions[definition.name] = definition

    @property
    def server_schema(self) -> GraphQLSchema:
        """Return the schema of the remote execution engine."""
        return self._server_schema

    @property
    def client_schema(self) -> GraphQLSchema:
        """Return the server schema, extended with the client-only types and fields."""
        return self._client_schema

    @property
    def definitions(self) -> Tuple[Definition, ...]:
        """Return all definitions, in the order in which they were added."""
        return tuple(self._definitions.values())

    def _with_definitions(self, definitions: Iterable[Definition]) -> "CompilerContext":
        return CompilerContext(self._server_schema, self._client_schema, definitions)

    def add(self, definition: Definition) -> "CompilerContext":
        """Return a new context that also contains the given definition."""
        return self.add_all([definition])

    def add_all(self, definitions: Iterable[Definition]) -> "CompilerContext":
        """Return a new context that also contains all the given definitions."""
        return self._with_definitions(list(self._definitions.values()) + list(definitions))

    def replace(self, definition: Definition) -> "CompilerContext":
        """Return a new context where the same-named existing definition is replaced."""
        # Raises UnknownDefinitionError if there is nothing to replace.
        self.get(definition.name)
        return self._with_definitions(
            definition if existing_definition.name == definition.name else existing_definition
            for existing_definition in self._definitions.values()
        )

    def get(self, name: str) -> Definition:
        """Return the definition with the given name."""
        definition = self._definitions.get(name)
        if definition is None:
            raise UnknownDefinitionError("Unknown definition `{}`.".format(name))
        return definition

    def get_fragment(self, name: str) -> Fragment:
        """Return the fragment with the given name."""
        definition = self._definitions.get(name)
        if not isinstance(definition, Fragment):
            locations = [definition.loc] if definition is not None else []
            raise UnknownDefinitionError("Unknown fragment `{}`.".format(name), locations)
        return definition

    def get_root(self, name: str) -> Root:
        """Return the query, mutation or subscription with the given name."""
        definition = self._definitions.get(name)
        if not isinstance(definition, Root):
            locations = [definition.loc] if definition is not None else []
            raise UnknownDefinitionError("Unknown operation `{}`.".format(name), locations)
        return definition

    def transform_definitions(self, definition_fn: DefinitionTransformFn) -> "CompilerContext":
        """Return a new context made of the results of applying the function to every definition.

        Definitions for which the function returns None are removed from the new context.
        The function is applied to the definitions in order. Any error it raises is propagated,
        and aborts the whole transform.
        """
        new_definitions = []
        for definition in self._definitions.values():
            new_definition = definition_fn(definition)
            if new_definition is None:
                logger.debug("Removing definition %(name)s.", {"name": definition.name})
            else:
                new_definitions.append(new_definition)
        return self._with_definitions(new_definitions)
