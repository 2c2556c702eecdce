# Copyright 2026-present Kensho Technologies, LLC.
"""Definitions of the nodes of the compiler's intermediate representation (IR).

IR nodes are immutable. Passes over the IR never modify a node in-place: they build new nodes
out of the fields of existing ones, and the input and output of a pass may share unmodified
subtrees.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, FrozenSet, Iterable, Optional, Tuple, TypeVar, Union

from graphql import (
    GraphQLCompositeType,
    GraphQLOutputType,
    OperationType,
    SourceLocation,
)
from graphql.language.ast import (
    ArgumentNode,
    DirectiveNode,
    ValueNode,
    VariableDefinitionNode,
)


class IRNode(object):
    """Base class of all IR nodes."""

    __slots__ = ()


class Selection(IRNode):
    """Base class of all the nodes that can appear in the selections of another node."""

    __slots__ = ()


class Definition(IRNode):
    """Base class of all top-level compiled units."""

    __slots__ = ()


Metadata = Optional[Dict[str, Any]]


@dataclass(frozen=True)
class ScalarField(Selection):
    """A field whose type has no fields of its own, e.g. a string, an enum or a custom scalar."""

    name: str
    type: GraphQLOutputType
    alias: Optional[str] = None
    arguments: Tuple[ArgumentNode, ...] = ()
    directives: Tuple[DirectiveNode, ...] = ()
    metadata: Metadata = None
    loc: Optional[SourceLocation] = None


@dataclass(frozen=True)
class LinkedField(Selection):
    """A field of object, interface or union type, together with the selections made on it."""

    name: str
    type: GraphQLOutputType
    selections: Tuple[Selection, ...]
    alias: Optional[str] = None
    arguments: Tuple[ArgumentNode, ...] = ()
    directives: Tuple[DirectiveNode, ...] = ()
    metadata: Metadata = None
    loc: Optional[SourceLocation] = None


@dataclass(frozen=True)
class InlineFragment(Selection):
    """Selections that only apply when the parent object is of the type condition's type."""

    type_condition: GraphQLCompositeType
    selections: Tuple[Selection, ...]
    directives: Tuple[DirectiveNode, ...] = ()
    metadata: Metadata = None
    loc: Optional[SourceLocation] = None


@dataclass(frozen=True)
class FragmentSpread(Selection):
    """A reference to a named fragment, which is compiled independently as its own definition."""

    name: str
    arguments: Tuple[ArgumentNode, ...] = ()
    directives: Tuple[DirectiveNode, ...] = ()
    metadata: Metadata = None
    loc: Optional[SourceLocation] = None


@dataclass(frozen=True)
class Condition(Selection):
    """Selections only made if the condition evaluates to the passing value (@include / @skip)."""

    # Either a VariableNode or a BooleanValueNode.
    condition: ValueNode
    passing_value: bool
    selections: Tuple[Selection, ...]
    metadata: Metadata = None
    loc: Optional[SourceLocation] = None


@dataclass(frozen=True)
class Defer(Selection):
    """Selections whose data may be delivered in a later payload, identified by the label."""

    label: str
    selections: Tuple[Selection, ...]
    if_condition: Optional[ValueNode] = None
    metadata: Metadata = None
    loc: Optional[SourceLocation] = None


@dataclass(frozen=True)
class Stream(Selection):
    """A list field whose items after the first initial_count may arrive incrementally."""

    label: str
    selections: Tuple[Selection, ...]
    initial_count: Optional[ValueNode] = None
    if_condition: Optional[ValueNode] = None
    metadata: Metadata = None
    loc: Optional[SourceLocation] = None


@dataclass(frozen=True)
class ModuleImport(Selection):
    """A fragment spread whose data is consumed by a separately loaded module (@module)."""

    module: str
    document_name: str
    selections: Tuple[Selection, ...]
    metadata: Metadata = None
    loc: Optional[SourceLocation] = None


@dataclass(frozen=True)
class ClientExtension(Selection):
    """Selections that cannot be fetched from the server, and must be filled in locally."""

    selections: Tuple[Selection, ...]
    metadata: Metadata = None
    loc: Optional[SourceLocation] = None


@dataclass(frozen=True)
class Root(Definition):
    """A query, mutation or subscription operation."""

    name: str
    operation: OperationType
    type: Optional[GraphQLCompositeType]
    selections: Tuple[Selection, ...]
    variable_definitions: Tuple[VariableDefinitionNode, ...] = ()
    directives: Tuple[DirectiveNode, ...] = ()
    metadata: Metadata = None
    loc: Optional[SourceLocation] = None


@dataclass(frozen=True)
class Fragment(Definition):
    """A named fragment, whose selections apply to objects of its type condition's type."""

    name: str
    type: GraphQLCompositeType
    selections: Tuple[Selection, ...]
    variable_definitions: Tuple[VariableDefinitionNode, ...] = ()
    directives: Tuple[DirectiveNode, ...] = ()
    metadata: Metadata = None
    loc: Optional[SourceLocation] = None


@dataclass(frozen=True)
class SplitOperation(Definition):
    """An operation split off from another definition, e.g. to fetch the data of a @module."""

    name: str
    type: GraphQLCompositeType
    selections: Tuple[Selection, ...]
    parent_sources: FrozenSet[str] = frozenset()
    metadata: Metadata = None
    loc: Optional[SourceLocation] = None


NodeWithSelections = Union[
    Root,
    Fragment,
    SplitOperation,
    LinkedField,
    InlineFragment,
    Condition,
    Defer,
    Stream,
    ModuleImport,
    ClientExtension,
]

NodeT = TypeVar("NodeT", bound=NodeWithSelections)


def with_selections(node: NodeT, selections: Iterable[Selection]) -> NodeT:
    """Return a copy of the node, with its selections replaced by the given ones."""
    return replace(node, selections=tuple(selections))


# The selections that only add structure around their own selections, without changing
# the type of the object being selected from.
WRAPPER_SELECTION_TYPES = (Condition, Defer, ModuleImport, Stream)

SELECTION_TYPES = (
    ScalarField,
    LinkedField,
    InlineFragment,
    FragmentSpread,
    Condition,
    Defer,
    Stream,
    ModuleImport,
    ClientExtension,
)

DEFINITION_TYPES = (Root, Fragment, SplitOperation)
