# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Mindmap Sub-Parser
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Indentation-based mindmap grammar::

    # Root <relation>
    - Child
      - Grandchild

The root becomes an ``individual`` node, every item a ``class`` node
linked to its parent by the bracketed relation.  An item's parent is the
most recent item with strictly smaller indentation.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .context import ParseContext
from .lexer import MINDMAP_HEADING, MINDMAP_ITEM, clean_name
from .operations import (
    ORIGIN_MINDMAP,
    AddNode,
    AddRelation,
    NodePayload,
    Operation,
    RelationPayload,
)

logger = logging.getLogger(__name__)


def is_mindmap_heading(line: str) -> bool:
    return MINDMAP_HEADING.match(line) is not None


def is_mindmap_item(line: str) -> bool:
    return MINDMAP_ITEM.match(line) is not None


def parse_mindmap_block(
    lines: Sequence[str], context: Optional[ParseContext] = None
) -> List[Operation]:
    """Translate one mindmap block into AddNode/AddRelation operations."""
    ctx = context if context is not None else ParseContext()
    ops: List[Operation] = []
    if not lines:
        return ops

    heading = MINDMAP_HEADING.match(lines[0])
    if heading is None:
        logger.debug("Not a mindmap heading: %r", lines[0])
        return ops

    root_name = heading.group(1).strip()
    label = heading.group(2).strip()
    root_id = clean_name(root_name)
    ctx.declare(root_id)
    ops.append(
        AddNode(
            id=root_id,
            payload=NodePayload(base_name=root_name, display_name=root_name, role="individual"),
            origin=ORIGIN_MINDMAP,
        )
    )

    label_slug = clean_name(label)
    stack: List[Tuple[str, int]] = [(root_id, -1)]
    for line in lines[1:]:
        item = MINDMAP_ITEM.match(line)
        if item is None:
            continue
        indent = len(item.group(1))
        name = item.group(2).strip()
        item_id = clean_name(name)

        while len(stack) > 1 and stack[-1][1] >= indent:
            stack.pop()
        parent_id = stack[-1][0]

        ctx.declare(item_id)
        ops.append(
            AddNode(
                id=item_id,
                payload=NodePayload(base_name=name, display_name=name, role="class"),
                origin=ORIGIN_MINDMAP,
            )
        )
        rel_id = ctx.claim(f"rel_{parent_id}_{label_slug}_{item_id}", None, (label, 1))
        ops.append(
            AddRelation(
                id=rel_id,
                payload=RelationPayload(source=parent_id, target=item_id, name=label),
                origin=ORIGIN_MINDMAP,
            )
        )
        stack.append((item_id, indent))

    return ops
