# Copyright 2026-present Kensho Technologies, LLC.
from .client_extensions_transform import client_extensions_transform  # noqa
from .compiler_context import CompilerContext  # noqa
from .ir import (  # noqa
    ClientExtension,
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
)
from .ir_generation import ast_to_ir, graphql_to_ir  # noqa
from .schema_utils import is_client_defined_field  # noqa
