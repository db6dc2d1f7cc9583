# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — CNL Structural Parser
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
CNL text -> ordered operation stream.

The text is first split into mindmap and plain-CNL blocks.  Plain blocks
are folded into a node/morph tree (``#`` opens a node, ``##`` a morph of
the current node) and each section is scanned line by line with
:func:`~nodebook.cnl.lexer.classify_line`.  Unrecognized lines are skipped;
this module never raises on content.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .context import ParseContext
from .lexer import (
    CURRENCY_LINE,
    LineKind,
    classify_line,
    fence_language,
    fnv1a6,
    parse_attribute_line,
    parse_function_line,
    parse_heading,
    parse_relation_line,
    parse_relation_target,
    slug,
)
from .mindmap import is_mindmap_heading, is_mindmap_item, parse_mindmap_block
from .operations import (
    AddAttribute,
    AddMorph,
    AddNode,
    AddRelation,
    ApplyFunction,
    AttributePayload,
    CurrencyPayload,
    DescriptionPayload,
    FunctionPayload,
    MorphPayload,
    NodeFieldPayload,
    NodePayload,
    Operation,
    RelationPayload,
    SetCurrency,
    SetGraphDescription,
    UpdateNodeField,
)

logger = logging.getLogger(__name__)

ACCOUNTING_RELATIONS = {
    "debit": "has post_state",
    "credit": "has prior_state",
}

DESCRIPTION_FENCE = "description"
GRAPH_DESCRIPTION_FENCE = "graph-description"


@dataclass
class _Section:
    morph_name: Optional[str] = None
    lines: List[str] = field(default_factory=list)


@dataclass
class _NodeBlock:
    heading: str
    body: _Section = field(default_factory=_Section)
    morphs: List[_Section] = field(default_factory=list)

    @property
    def current(self) -> _Section:
        return self.morphs[-1] if self.morphs else self.body


# ── Pre-scan ─────────────────────────────────────────────────────────────────


def _extract_graph_description(lines: List[str]) -> Tuple[List[str], Optional[str]]:
    """Remove ``graph-description`` fences; return the remaining lines and the first text."""
    kept: List[str] = []
    description: Optional[str] = None
    capture: Optional[List[str]] = None
    in_other_fence = False
    for line in lines:
        if capture is not None:
            if classify_line(line) is LineKind.FENCE:
                if description is None:
                    description = "\n".join(capture).strip()
                capture = None
            else:
                capture.append(line)
            continue
        if classify_line(line) is LineKind.FENCE:
            if not in_other_fence and fence_language(line) == GRAPH_DESCRIPTION_FENCE:
                capture = []
                continue
            in_other_fence = not in_other_fence
        kept.append(line)
    if capture is not None:
        logger.debug("Unterminated graph-description fence ignored")
        kept.extend(capture)
    return kept, description


def _find_currency(lines: List[str]) -> Optional[str]:
    in_fence = False
    for line in lines:
        if classify_line(line) is LineKind.FENCE:
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        match = CURRENCY_LINE.match(line)
        if match:
            return match.group(1).strip()
    return None


def split_blocks(lines: List[str]) -> List[Tuple[str, List[str]]]:
    """Split lines into ``("mindmap" | "cnl", lines)`` blocks, in order."""
    blocks: List[Tuple[str, List[str]]] = []
    i = 0
    in_fence = False
    while i < len(lines):
        line = lines[i]
        if not in_fence and is_mindmap_heading(line):
            block = [line]
            i += 1
            while i < len(lines):
                nxt = lines[i]
                if not nxt.strip():
                    i += 1
                    continue
                if not is_mindmap_item(nxt):
                    break
                block.append(nxt)
                i += 1
            blocks.append(("mindmap", block))
            continue

        block = []
        while i < len(lines):
            line = lines[i]
            if not in_fence and block and is_mindmap_heading(line):
                break
            if classify_line(line) is LineKind.FENCE:
                in_fence = not in_fence
            block.append(line)
            i += 1
        blocks.append(("cnl", block))
    return blocks


def build_structural_tree(lines: List[str]) -> List[_NodeBlock]:
    tree: List[_NodeBlock] = []
    current: Optional[_NodeBlock] = None
    in_fence = False
    for line in lines:
        kind = classify_line(line)
        if in_fence:
            if current is not None:
                current.current.lines.append(line)
            if kind is LineKind.FENCE:
                in_fence = False
            continue
        if kind is LineKind.BLANK:
            continue
        if kind is LineKind.NODE_HEADING:
            current = _NodeBlock(heading=line.strip())
            tree.append(current)
            continue
        if kind is LineKind.MORPH_HEADING:
            if current is not None:
                current.morphs.append(_Section(morph_name=line.strip().lstrip("#").strip()))
            continue
        if kind is LineKind.FENCE:
            in_fence = True
        if current is not None:
            current.current.lines.append(line)
    return tree


# ── Section scanning ─────────────────────────────────────────────────────────


def _section_operations(
    node_id: str, section: _Section, morph_id: Optional[str], ctx: ParseContext
) -> List[Operation]:
    ops: List[Operation] = []
    description_done = False
    fence: Optional[str] = None
    fenced: List[str] = []

    for line in section.lines:
        kind = classify_line(line)
        if fence is not None:
            if kind is LineKind.FENCE:
                if fence == DESCRIPTION_FENCE and not description_done:
                    ops.append(
                        UpdateNodeField(
                            id=f"{node_id}_description",
                            payload=NodeFieldPayload(
                                node_id=node_id, field="description", value="\n".join(fenced).strip()
                            ),
                        )
                    )
                    description_done = True
                fence = None
                fenced = []
            else:
                fenced.append(line)
            continue

        if kind is LineKind.FENCE:
            fence = fence_language(line)
        elif kind is LineKind.ATTRIBUTE:
            ops.extend(_attribute_operations(node_id, line, morph_id, ctx))
        elif kind is LineKind.FUNCTION:
            ops.extend(_function_operations(node_id, line, morph_id, ctx))
        elif kind is LineKind.RELATION:
            ops.extend(_relation_operations(node_id, line, morph_id, ctx))
    return ops


def _attribute_operations(
    node_id: str, line: str, morph_id: Optional[str], ctx: ParseContext
) -> List[Operation]:
    parts = parse_attribute_line(line)
    if parts is None:
        return []
    payload = AttributePayload(
        source=node_id,
        name=parts.name,
        value=parts.value,
        unit=parts.unit,
        adverb=parts.adverb,
        modality=parts.modality,
        quantifier=parts.quantifier,
        morph_id=morph_id,
    )
    signature = (parts.name, parts.value, parts.unit, parts.adverb, parts.modality, parts.quantifier)
    base_id = f"attr_{node_id}_{slug(parts.name)}_{fnv1a6(parts.value)}"
    return [AddAttribute(id=ctx.claim(base_id, morph_id, signature), payload=payload)]


def _function_operations(
    node_id: str, line: str, morph_id: Optional[str], ctx: ParseContext
) -> List[Operation]:
    name = parse_function_line(line)
    if name is None:
        return []
    base_id = f"func_{node_id}_{slug(name)}"
    return [
        ApplyFunction(
            id=ctx.claim(base_id, morph_id, ("function", name)),
            payload=FunctionPayload(source=node_id, name=name, morph_id=morph_id),
        )
    ]


def _relation_operations(
    node_id: str, line: str, morph_id: Optional[str], ctx: ParseContext
) -> List[Operation]:
    parsed = parse_relation_line(line)
    if parsed is None:
        return []
    surface, targets = parsed
    name = ACCOUNTING_RELATIONS.get(surface, surface)
    placeholder_role = "Account" if surface in ACCOUNTING_RELATIONS else "class"

    ops: List[Operation] = []
    for raw in targets:
        target = parse_relation_target(raw)
        if not target.node_id:
            logger.debug("Relation target %r has no usable name", raw)
            continue
        if ctx.declare(target.node_id):
            ops.append(
                AddNode(
                    id=target.node_id,
                    payload=NodePayload(
                        base_name=target.base_name,
                        display_name=target.display_name,
                        role=placeholder_role,
                        adjective=target.adjective,
                    ),
                )
            )
        base_id = f"rel_{node_id}_{slug(surface)}_{target.node_id}"
        ops.append(
            AddRelation(
                id=ctx.claim(base_id, morph_id, (name, target.weight)),
                payload=RelationPayload(
                    source=node_id,
                    target=target.node_id,
                    name=name,
                    weight=target.weight,
                    morph_id=morph_id,
                    target_surface=target.surface,
                ),
            )
        )
    return ops


def _node_operations(block: _NodeBlock, ctx: ParseContext) -> List[Operation]:
    heading = parse_heading(block.heading)
    node_id = heading.node_id
    ctx.declare(node_id)
    ops: List[Operation] = [
        AddNode(
            id=node_id,
            payload=NodePayload(
                base_name=heading.base_name,
                display_name=heading.display_name,
                role=heading.role,
                adjective=heading.adjective,
                quantifier=heading.quantifier,
            ),
        )
    ]
    ops.extend(_section_operations(node_id, block.body, None, ctx))

    for section in block.morphs:
        name = section.morph_name or ""
        morph_id = f"{node_id}_morph_{slug(name)}_{ctx.next_morph_number()}"
        ops.append(
            AddMorph(
                id=f"{node_id}_morph_{name}",
                payload=MorphPayload(node_id=node_id, morph_id=morph_id, name=name),
            )
        )
        ops.extend(_section_operations(node_id, section, morph_id, ctx))
    return ops


# ── Entry point ──────────────────────────────────────────────────────────────


def get_operations(text: str, context: Optional[ParseContext] = None) -> List[Operation]:
    """Parse one CNL text block into an ordered operation list."""
    if not text:
        return []
    ctx = context if context is not None else ParseContext()

    lines = text.replace("\r\n", "\n").split("\n")
    lines, graph_description = _extract_graph_description(lines)
    blocks = split_blocks(lines)

    trees = []
    for kind, block_lines in blocks:
        if kind == "cnl":
            tree = build_structural_tree(block_lines)
            # headings declared anywhere suppress placeholder nodes
            for node_block in tree:
                ctx.declare(parse_heading(node_block.heading).node_id)
            trees.append((kind, tree))
        else:
            trees.append((kind, block_lines))

    operations: List[Operation] = []
    for kind, item in trees:
        if kind == "mindmap":
            operations.extend(parse_mindmap_block(item, ctx))
            continue
        for node_block in item:
            operations.extend(_node_operations(node_block, ctx))

    if graph_description is not None:
        operations.append(
            SetGraphDescription(
                id="graph_description", payload=DescriptionPayload(description=graph_description)
            )
        )
    currency = _find_currency(lines)
    if currency is not None:
        operations.append(SetCurrency(id="graph_currency", payload=CurrencyPayload(currency=currency)))

    logger.debug("Parsed %d operations from %d blocks", len(operations), len(blocks))
    return operations
