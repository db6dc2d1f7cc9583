# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — CNL Compiler
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Controlled-Natural-Language compiler
====================================

Text -> operation stream -> knowledge graph.

``parser.get_operations``
    Line classifier + structural parser (mindmap blocks included).

``assembler.operations_to_graph``
    Three-pass graph assembly into ``model.GraphData``.

``morph_registry.MorphRegistry``
    Morph visibility index over an assembled graph.

``validation.validate_operations``
    Advisory checks against a ``schemas.SchemaCatalog``.
"""

from .model import Attribute, Edge, GraphData, Morph, Node, ParseError
from .operations import (
    AddAttribute,
    AddMorph,
    AddNode,
    AddRelation,
    ApplyFunction,
    Operation,
    SetCurrency,
    SetGraphDescription,
    UpdateNodeField,
)
from .context import ParseContext
from .parser import get_operations
from .mindmap import parse_mindmap_block
from .assembler import operations_to_graph
from .morph_registry import MorphRegistry
from .schemas import SchemaCatalog, default_catalog
from .schema_parser import merge_schema_results, parse_schema_block
from .validation import SchemaWarning, validate_operations

__all__ = [
    # Model
    "Attribute",
    "Edge",
    "GraphData",
    "Morph",
    "Node",
    "ParseError",
    # Operations
    "AddAttribute",
    "AddMorph",
    "AddNode",
    "AddRelation",
    "ApplyFunction",
    "Operation",
    "SetCurrency",
    "SetGraphDescription",
    "UpdateNodeField",
    # Parsing
    "ParseContext",
    "get_operations",
    "parse_mindmap_block",
    "operations_to_graph",
    "MorphRegistry",
    # Schemas
    "SchemaCatalog",
    "default_catalog",
    "parse_schema_block",
    "merge_schema_results",
    "SchemaWarning",
    "validate_operations",
]
