# Copyright 2026-present Kensho Technologies, LLC.
from typing import Iterable, List, Optional

from graphql import SourceLocation


class GraphQLError(Exception):
    """Generic error when processing GraphQL."""


class GraphQLParsingError(GraphQLError):
    """Exception raised when the provided GraphQL string could not be parsed."""


class GraphQLValidationError(GraphQLError):
    """Exception raised when the provided GraphQL does not validate against the provided schema."""


class GraphQLSchemaError(GraphQLError):
    """Exception raised when a server schema or client schema extension cannot be built.

    This could be due to many reasons, such as:
    - the schema text is not valid GraphQL SDL;
    - the client extension refers to types that do not exist in the server schema;
    - the client extension redefines a type or field that the server schema already defines.
    """


class GraphQLLocatedError(GraphQLError):
    """Error pointing at one or more places in the GraphQL source that caused it."""

    message: str
    locations: List[SourceLocation]

    def __init__(
        self, message: str, locations: Optional[Iterable[Optional[SourceLocation]]] = None
    ) -> None:
        """Record the error message, and the source locations of the offending nodes, if known."""
        super().__init__(message)
        self.message = message
        self.locations = [location for location in locations or () if location is not None]

    def __str__(self) -> str:
        """Return the error message, followed by the source locations it refers to."""
        if not self.locations:
            return self.message
        formatted_locations = ", ".join(
            "{}:{}".format(location.line, location.column) for location in self.locations
        )
        return "{} Source location(s): {}".format(self.message, formatted_locations)


class GraphQLUserError(GraphQLLocatedError):
    """Exception raised when the provided documents or schemas are inconsistent with each other.

    These errors are fixable by the user, by correcting the documents or updating the schemas.
    """


class MissingTypeError(GraphQLUserError):
    """Exception raised when a definition or inline fragment refers to a type neither schema has.

    This generally means that the server schema or the client schema extension is out of date
    with respect to the documents being compiled.
    """


class UnknownDefinitionError(GraphQLUserError):
    """Exception raised when looking up a fragment or operation that does not exist."""


class DuplicateDefinitionError(GraphQLUserError):
    """Exception raised when two definitions in the same compiler context share a name."""


class InternalInconsistencyError(GraphQLLocatedError):
    """Exception raised when the compiler reaches a state its own invariants should rule out.

    For example:
    - a field was classified as resolvable by the server, but its type cannot be found;
    - a selection of a kind the compiler does not know how to process was encountered.
    This always indicates a bug in the compiler or in one of the passes preceding it,
    not a problem with the user's documents.
    """
