# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — CNL Line Classifier & Extraction Stages
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Line-level lexing for the CNL grammar.

``classify_line`` assigns every raw line a :class:`LineKind`.  The
attribute, heading and relation-target decoders are composed from small
extraction stages, each of which returns ``(extracted, remainder)`` so it
can be tested on its own.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from .model import Number

# ── Patterns ─────────────────────────────────────────────────────────────────

_NODE_HEADING = re.compile(r"^\s*#\s+\S")
_MORPH_HEADING = re.compile(r"^\s*##\s+(.+)$")
_DEEP_HEADING = re.compile(r"^\s*###")
_FENCE = re.compile(r"^\s*```\s*([\w-]*)\s*$")
_RELATION = re.compile(r"^\s*<(.+?)>\s*(.*)$")
_FUNCTION = re.compile(r'^\s*has\s+function\s+"([^"]+)"\s*;')
_ATTRIBUTE = re.compile(r"^\s*(?:has\s+)?([^:<]+):\s*([^;]+);?")

_HEADING = re.compile(r"^\s*(#+)\s*(?:\*([^*]+)\*\s+)?(?:\*\*(.+?)\*\*\s*)?(.+?)(?:\s*\[(.+?)\])?$")
_HEADING_HASHES = re.compile(r"^\s*#+\s*")

MINDMAP_HEADING = re.compile(r"^\s*#\s+(.+?)\s+<([^>]+)>\s*$")
MINDMAP_ITEM = re.compile(r"^(\s*)-\s+(.+)$")
CURRENCY_LINE = re.compile(r"^\s*currency\s*:\s*([^;\n]+?)\s*;?\s*$", re.IGNORECASE | re.MULTILINE)

_UNIT_SPAN = re.compile(r"\*([^*]+)\*")
_ADVERB_SPAN = re.compile(r"\+\+([^+]+)\+\+")
_MODALITY_SPAN = re.compile(r"\[([^\]]+)\]")
_WEIGHT = re.compile(r"^(\d+(?:\.\d{1,2})?)\s+(.+)$")
_TARGET_ADJECTIVE = re.compile(r"\*\*?([^*]+)\*\*?\s+(.+)")

_NON_SLUG = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")

QUANTIFIER_ALIASES = {
    "all": "universal",
    "every": "universal",
    "some": "existential",
    "exists": "existential",
}


class LineKind(enum.Enum):
    BLANK = "blank"
    FENCE = "fence"
    NODE_HEADING = "node_heading"
    MORPH_HEADING = "morph_heading"
    RELATION = "relation"
    FUNCTION = "function"
    ATTRIBUTE = "attribute"
    TEXT = "text"


def classify_line(line: str) -> LineKind:
    """Classify one raw CNL line without any block context."""
    stripped = line.strip()
    if not stripped:
        return LineKind.BLANK
    if _FENCE.match(line):
        return LineKind.FENCE
    if _DEEP_HEADING.match(line):
        return LineKind.TEXT
    if _MORPH_HEADING.match(line):
        return LineKind.MORPH_HEADING
    if _NODE_HEADING.match(line):
        return LineKind.NODE_HEADING
    if stripped.startswith("<"):
        return LineKind.RELATION if _RELATION.match(line) else LineKind.TEXT
    if _FUNCTION.match(line):
        return LineKind.FUNCTION
    if ":" in stripped and _ATTRIBUTE.match(line):
        return LineKind.ATTRIBUTE
    return LineKind.TEXT


def fence_language(line: str) -> str:
    """Info string of a fence line (``"description"`` for ```` ```description ````)."""
    match = _FENCE.match(line)
    return match.group(1) if match else ""


# ── Identifiers ──────────────────────────────────────────────────────────────


def clean_name(name: str) -> str:
    """Case-fold, drop punctuation (keeping ``-``) and join words with ``_``."""
    lowered = _NON_SLUG.sub("", name.strip().lower())
    return _WHITESPACE.sub("_", lowered.strip())


def slug(text: str) -> str:
    """Lower-case and replace whitespace runs with ``_`` (punctuation kept)."""
    return _WHITESPACE.sub("_", text.strip().lower())


def node_id_for(base_name: str, adjective: Optional[str] = None) -> str:
    base = clean_name(base_name)
    if adjective:
        return f"{clean_name(adjective)}_{base}"
    return base


def fnv1a6(text: str) -> str:
    """First six hex digits of the 32-bit FNV-1a hash over UTF-16 code units."""
    h = 0x811C9DC5
    data = text.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = (h * 0x01000193) & 0xFFFFFFFF
    return f"{h:08x}"[:6]


def normalize_quantifier(token: Optional[str]) -> Optional[str]:
    if token is None:
        return None
    token = token.strip()
    if not token:
        return None
    return QUANTIFIER_ALIASES.get(token.lower(), token)


def number_from_text(text: str) -> Number:
    value = float(text)
    return int(value) if value.is_integer() else value


# ── Extraction stages ────────────────────────────────────────────────────────


def _cut(pattern: "re.Pattern[str]", value: str) -> Tuple[Optional[str], str]:
    match = pattern.search(value)
    if match is None:
        return None, value
    remainder = value[: match.start()] + value[match.end():]
    return match.group(1).strip(), remainder.strip()


def extract_unit(value: str) -> Tuple[Optional[str], str]:
    return _cut(_UNIT_SPAN, value)


def extract_quantifier(value: str) -> Tuple[Optional[str], str]:
    return _cut(_UNIT_SPAN, value)


def extract_adverb(value: str) -> Tuple[Optional[str], str]:
    return _cut(_ADVERB_SPAN, value)


def extract_modality(value: str) -> Tuple[Optional[str], str]:
    return _cut(_MODALITY_SPAN, value)


def split_weight(target: str) -> Tuple[Number, str]:
    """``"6 CO2"`` -> ``(6, "CO2")``; targets without a weight get 1."""
    match = _WEIGHT.match(target)
    if match is None:
        return 1, target
    return number_from_text(match.group(1)), match.group(2).strip()


def split_adjective(target: str) -> Tuple[Optional[str], str]:
    """``"**hot** Water"`` or ``"*hot* Water"`` -> ``("hot", "Water")``."""
    match = _TARGET_ADJECTIVE.search(target)
    if match is None:
        return None, target
    return match.group(1).strip(), match.group(2).strip()


# ── Line decoders ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class HeadingParts:
    node_id: str
    base_name: str
    display_name: str
    role: str
    adjective: Optional[str] = None
    quantifier: Optional[str] = None


@dataclass(frozen=True)
class AttributeParts:
    name: str
    value: str
    unit: Optional[str] = None
    quantifier: Optional[str] = None
    adverb: Optional[str] = None
    modality: Optional[str] = None


@dataclass(frozen=True)
class RelationTarget:
    node_id: str
    base_name: str
    display_name: str
    weight: Number = 1
    adjective: Optional[str] = None

    @property
    def surface(self) -> str:
        """Spelling in heading form (``**adj** Base``), without the weight."""
        return f"**{self.adjective}** {self.base_name}" if self.adjective else self.base_name


def parse_heading(line: str, default_role: str = "individual") -> HeadingParts:
    quantifier = adjective = role = None
    match = _HEADING.match(line)
    if match:
        quantifier = match.group(2)
        adjective = match.group(3)
        base_name = match.group(4).strip()
        role = match.group(5)
    else:
        base_name = _HEADING_HASHES.sub("", line).strip()

    if role is None:
        inline = _MODALITY_SPAN.search(base_name)
        if inline:
            role = inline.group(1)
            base_name = (base_name[: inline.start()] + base_name[inline.end():]).strip()
    role = role.strip() if role else default_role
    adjective = adjective.strip() if adjective else None

    display_name = f"**{adjective}** {base_name}" if adjective else base_name
    return HeadingParts(
        node_id=node_id_for(base_name, adjective),
        base_name=base_name,
        display_name=display_name,
        role=role,
        adjective=adjective,
        quantifier=normalize_quantifier(quantifier),
    )


def parse_attribute_line(line: str) -> Optional[AttributeParts]:
    match = _ATTRIBUTE.match(line)
    if match is None:
        return None
    name = match.group(1).strip()
    value = match.group(2).strip()

    unit, value = extract_unit(value)
    quantifier = None
    if unit is not None:
        quantifier, value = extract_quantifier(value)
    adverb, value = extract_adverb(value)
    modality, value = extract_modality(value)

    return AttributeParts(
        name=name,
        value=value.strip(),
        unit=unit,
        quantifier=quantifier,
        adverb=adverb,
        modality=modality,
    )


def parse_function_line(line: str) -> Optional[str]:
    match = _FUNCTION.match(line)
    return match.group(1).strip() if match else None


def parse_relation_line(line: str) -> Optional[Tuple[str, Tuple[str, ...]]]:
    """Split ``<name> t1; t2;`` into the relation name and raw targets."""
    match = _RELATION.match(line)
    if match is None:
        return None
    targets = tuple(t.strip() for t in match.group(2).split(";") if t.strip())
    return match.group(1).strip(), targets


def parse_relation_target(raw: str) -> RelationTarget:
    weight, target = split_weight(raw.strip())
    adjective, base_name = split_adjective(target)
    return RelationTarget(
        node_id=node_id_for(base_name, adjective),
        base_name=base_name,
        display_name=target,
        weight=weight,
        adjective=adjective,
    )
