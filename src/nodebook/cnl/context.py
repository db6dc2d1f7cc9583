# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Parse Context
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Per-call parser state: morph counter, declared node ids, id claims."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Hashable, Optional, Set, Tuple


@dataclass
class ParseContext:
    """State threaded through one top-level parse.

    A fresh context is created for every ``get_operations`` call, so the
    same input always yields the same ids.
    """

    morph_counter: int = 0
    declared: Set[str] = field(default_factory=set)
    _claims: Dict[str, Tuple[Set[Optional[str]], Hashable]] = field(default_factory=dict)

    def next_morph_number(self) -> int:
        self.morph_counter += 1
        return self.morph_counter

    def declare(self, node_id: str) -> bool:
        """Mark *node_id* as declared; return ``True`` if it was new."""
        if node_id in self.declared:
            return False
        self.declared.add(node_id)
        return True

    def claim(self, base_id: str, scope: Optional[str], signature: Hashable) -> str:
        """Return a record id for *base_id* declared in *scope*.

        Repeating an id inside one scope yields ``_2``, ``_3`` … suffixes
        (parallel arcs).  Repeating it with the same signature in another
        scope returns the existing id so the record gains one more morph.
        """
        candidate = base_id
        n = 1
        while True:
            entry = self._claims.get(candidate)
            if entry is None:
                self._claims[candidate] = ({scope}, signature)
                return candidate
            scopes, existing = entry
            if scope not in scopes and existing == signature:
                scopes.add(scope)
                return candidate
            n += 1
            candidate = f"{base_id}_{n}"
