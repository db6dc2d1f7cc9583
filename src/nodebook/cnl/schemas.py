# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Schema Catalog
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Schema Catalog: node, relation, attribute, transition and function types.

The default dictionaries describe the built-in vocabulary.  User-declared
schemas are merged on top by name (a user entry replaces the default entry
of the same name).  Function descriptors are metadata only; their
expressions are never evaluated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, TypeVar


@dataclass(frozen=True)
class NodeTypeSchema:
    name: str
    description: str = ""
    parent_types: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RelationTypeSchema:
    name: str
    description: str = ""
    domain: Tuple[str, ...] = ()
    range: Tuple[str, ...] = ()
    symmetric: Optional[bool] = None
    transitive: Optional[bool] = None
    inverse_name: Optional[str] = None
    aliases: Tuple[str, ...] = ()


@dataclass(frozen=True)
class StructureField:
    type: str
    unit: Optional[str]
    description: str


@dataclass(frozen=True)
class AttributeTypeSchema:
    name: str
    data_type: str
    description: str = ""
    unit: Optional[str] = None
    domain: Tuple[str, ...] = ()
    allowed_values: Optional[Tuple[str, ...]] = None
    complex_type: Optional[str] = None
    structure: Optional[Mapping[str, StructureField]] = None


@dataclass(frozen=True)
class TransitionTypeSchema:
    name: str
    description: str = ""
    inputs: Tuple[str, ...] = ()
    outputs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class FunctionTypeSchema:
    name: str
    expression: str
    scope: Tuple[str, ...] = ()
    description: Optional[str] = None
    required_attributes: Tuple[str, ...] = ()


# ── Default node types ───────────────────────────────────────────────────────

NODE_TYPES: Tuple[NodeTypeSchema, ...] = (
    NodeTypeSchema("class", "A class or category of entities"),
    NodeTypeSchema("individual", "A specific instance of a class"),
    NodeTypeSchema("Resource", "Goods, services, or money that have economic value.", ("class",)),
    NodeTypeSchema("Event", "An economic event that changes the quantity of a resource.", ("class",)),
    NodeTypeSchema("Agent", "A person or company who participates in an economic event.", ("class",)),
    NodeTypeSchema("LogicalOperator", "A node representing a logical condition like AND or OR.", ("class",)),
    NodeTypeSchema("Substance", "A material with definite chemical composition.", ("class",)),
    NodeTypeSchema("Element", "A pure substance consisting of one type of atom.", ("Substance",)),
    NodeTypeSchema("Molecule", "A group of atoms bonded together.", ("Substance",)),
    NodeTypeSchema("Transition", "A process that transforms inputs to outputs.", ("class",)),
    NodeTypeSchema(
        "Transaction",
        "An accounting transaction that moves value between accounts (double-entry).",
        ("class",),
    ),
    NodeTypeSchema("Account", "A general ledger account that holds monetary value.", ("class",)),
    NodeTypeSchema("Asset", "An account representing resources owned (debit-normal).", ("Account",)),
    NodeTypeSchema("Liability", "An account representing obligations owed (credit-normal).", ("Account",)),
    NodeTypeSchema("Equity", "An account representing owner's residual interest (credit-normal).", ("Account",)),
    NodeTypeSchema("Revenue", "An account representing income earned (credit-normal).", ("Account",)),
    NodeTypeSchema("Expense", "An account representing costs incurred (debit-normal).", ("Account",)),
    NodeTypeSchema("Person", "A human being", ("Agent",)),
    NodeTypeSchema("Organization", "A group of people organized for a purpose", ("Agent",)),
    NodeTypeSchema("Place", "A physical location or geographical area", ("individual",)),
    NodeTypeSchema("Concept", "An abstract idea or mental construct", ("individual",)),
    NodeTypeSchema("Object", "A physical thing or artifact", ("individual",)),
)

_ACCOUNT_RANGE = ("Account", "Asset", "Liability", "Equity", "Revenue", "Expense")

# ── Default relation types ───────────────────────────────────────────────────

RELATION_TYPES: Tuple[RelationTypeSchema, ...] = (
    RelationTypeSchema("inflow", "An event increases a resource.", ("Event",), ("Resource",)),
    RelationTypeSchema("outflow", "An event decreases a resource.", ("Event",), ("Resource",)),
    RelationTypeSchema("provides", "An agent provides resources to an event.", ("Agent",), ("Event",)),
    RelationTypeSchema("receives", "An agent receives resources from an event.", ("Agent",), ("Event",)),
    RelationTypeSchema(
        "duality",
        "Connects reciprocal events (e.g., a sale and a payment).",
        ("Event",),
        ("Event",),
        symmetric=True,
    ),
    RelationTypeSchema(
        "stockflow", "Connects an economic event to the resource it affects.", ("Event",), ("Resource",)
    ),
    RelationTypeSchema(
        "is_a",
        'Subsumption between two types/classes (e.g., "Human is a Mammal").',
        ("class",),
        ("class",),
        symmetric=False,
        transitive=True,
        inverse_name="has_subtype",
        aliases=("is a",),
    ),
    RelationTypeSchema(
        "member_of",
        'An individual belongs to a class (e.g., "Socrates is a member of Humans").',
        ("individual",),
        ("class",),
        symmetric=False,
        transitive=False,
        inverse_name="has_member",
        aliases=("member of",),
    ),
    RelationTypeSchema(
        "instance_of",
        'An individual is an instance of a class (e.g., "Earth is an instance of Planet").',
        ("individual",),
        ("class",),
        symmetric=False,
        transitive=False,
        inverse_name="has_instance",
        aliases=("instance of",),
    ),
    RelationTypeSchema(
        "part_of",
        "Indicates that one entity is a part of another entity",
        symmetric=False,
        transitive=True,
        inverse_name="has_part",
    ),
    RelationTypeSchema(
        "is a type of",
        "Indicates that a class is a subtype of another class.",
        ("class",),
        ("class",),
        transitive=True,
        inverse_name="is a parent type of",
    ),
    RelationTypeSchema("has prior_state", "Defines the inputs and conditions for a transition.", ("Transition", "Transaction")),
    RelationTypeSchema("has post_state", "Defines the outputs of a transition.", ("Transition", "Transaction")),
    RelationTypeSchema(
        "debit",
        "Debits an account (increases assets/expenses, decreases liabilities/equity/revenue).",
        ("Transaction",),
        _ACCOUNT_RANGE,
    ),
    RelationTypeSchema(
        "credit",
        "Credits an account (decreases assets/expenses, increases liabilities/equity/revenue).",
        ("Transaction",),
        _ACCOUNT_RANGE,
    ),
    RelationTypeSchema("has operand", "Links a LogicalOperator to one of its operands.", ("LogicalOperator",)),
)


# ── Default attribute types ──────────────────────────────────────────────────


def _attr(
    name: str,
    data_type: str,
    description: str,
    domain: Sequence[str] = (),
    unit: Optional[str] = None,
    allowed_values: Optional[Sequence[str]] = None,
) -> AttributeTypeSchema:
    return AttributeTypeSchema(
        name=name,
        data_type=data_type,
        description=description,
        unit=unit,
        domain=tuple(domain),
        allowed_values=tuple(allowed_values) if allowed_values is not None else None,
    )


_VEHICLE_LIKE = ("Object", "Particle", "Vehicle")
_DOCUMENT = ("Document",)

ATTRIBUTE_TYPES: Tuple[AttributeTypeSchema, ...] = (
    _attr("charge", "float", "Measures electric charge.", ("Electron", "Ion"), "coulomb (C)"),
    _attr("energy", "float", "Quantifies the capacity to do work.", ("Particle", "Field", "Reaction"), "joule (J)"),
    _attr("mass", "float", "Measures the amount of matter in an object.", ("Particle", "Planet", "Organism"), "kilogram (kg)"),
    _attr("population", "number", "Number of inhabitants", ("City", "Region", "Country")),
    _attr("temperature", "float", "Indicates thermal energy level.", ("Gas", "Liquid", "Solid"), "kelvin (K)"),
    _attr("velocity", "float", "Describes the rate of change of position.", ("Particle", "Vehicle"), "meters per second (m/s)"),
    _attr("area", "float", "Any place will have an attribute 'area'", ("Place",)),
    _attr("Alternate name", "string", "Any thing that is called by another name"),
    _attr("name", "string", "The primary name or title of an entity"),
    _attr("description", "string", "A detailed description or explanation of an entity"),
    _attr("identifier", "string", "A unique identifier or code for an entity"),
    _attr("url", "string", "A web address or link associated with an entity"),
    _attr("email", "string", "An email address associated with a person or organization", ("Person", "Organization")),
    _attr("phone", "string", "A phone number associated with a person or organization", ("Person", "Organization")),
    _attr("birth_date", "date", "The date when a person was born", ("Person",)),
    _attr("death_date", "date", "The date when a person died", ("Person",)),
    _attr("founded_date", "date", "The date when an organization was established", ("Organization",)),
    _attr("start_date", "date", "The beginning date of an event or period", ("Event",)),
    _attr("end_date", "date", "The ending date of an event or period", ("Event",)),
    _attr("created_date", "date", "The date when an entity was created"),
    _attr("modified_date", "date", "The date when an entity was last modified"),
    _attr("latitude", "float", "Geographic latitude coordinate", ("Place", "Location"), "degrees"),
    _attr("longitude", "float", "Geographic longitude coordinate", ("Place", "Location"), "degrees"),
    _attr("elevation", "float", "Height above sea level", ("Place", "Location"), "meters"),
    _attr("width", "float", "The width dimension of an object", ("Object",), "meters"),
    _attr("height", "float", "The height dimension of an object", ("Object",), "meters"),
    _attr("depth", "float", "The depth dimension of an object", ("Object",), "meters"),
    _attr("weight", "float", "The weight of an object", ("Object",), "kilograms"),
    _attr("color", "string", "The color of an object", ("Object",)),
    _attr("material", "string", "The material an object is made of", ("Object",)),
    _attr(
        "status",
        "string",
        "The current status or state of an entity",
        allowed_values=("active", "inactive", "pending", "completed", "cancelled"),
    ),
    _attr("type", "string", "The type or category of an entity"),
    _attr("category", "string", "A category or classification of an entity"),
    _attr("tag", "string", "A tag or label associated with an entity"),
    _attr("language", "string", "The language of a document or communication", _DOCUMENT),
    _attr("format", "string", "The format of a document or file", _DOCUMENT),
    _attr("size", "number", "The size of a file or document in bytes", _DOCUMENT, "bytes"),
    _attr("version", "string", "The version number of an entity"),
    _attr("author", "string", "The author or creator of a document or work", _DOCUMENT),
    _attr("publisher", "string", "The publisher of a document or work", _DOCUMENT),
    _attr("isbn", "string", "International Standard Book Number", _DOCUMENT),
    _attr("issn", "string", "International Standard Serial Number", _DOCUMENT),
    _attr("price", "float", "The price or cost of an item", ("Object",), "currency"),
    _attr(
        "currency",
        "string",
        "The currency used for a price or monetary value",
        allowed_values=("USD", "EUR", "GBP", "JPY", "CNY", "INR"),
    ),
    _attr("balance", "float", "The opening balance of an account", _ACCOUNT_RANGE, "currency"),
    _attr("rating", "float", "A numerical rating or score"),
    _attr("score", "float", "A numerical score or grade"),
    _attr("count", "number", "A count or quantity of items"),
    _attr("percentage", "float", "A percentage value", unit="percent"),
    _attr("frequency", "float", "The frequency of occurrence or repetition", unit="hertz (Hz)"),
    _attr("duration", "float", "The duration or length of time", ("Event",), "seconds"),
    _attr("distance", "float", "The distance between two points", unit="meters"),
    _attr("volume", "float", "The volume of an object or container", ("Object",), "cubic meters"),
    _attr("density", "float", "The density of a material", ("Object",), "kg/m^3"),
    _attr("number of protons", "string", "Attribute type used in the graph"),
    _attr("number of neutrons", "string", "Attribute type used in the graph"),
    _attr("number of electrons", "string", "Attribute type used in the graph"),
    AttributeTypeSchema(
        name="position",
        data_type="complex",
        complex_type="position",
        description="A 3D position coordinates as a single data type.",
        domain=_VEHICLE_LIKE,
        unit="meters (m)",
        structure={
            "x": StructureField("float", "meters (m)", "X-coordinate"),
            "y": StructureField("float", "meters (m)", "Y-coordinate"),
            "z": StructureField("float", "meters (m)", "Z-coordinate"),
        },
    ),
    AttributeTypeSchema(
        name="time",
        data_type="complex",
        complex_type="time",
        description='Time as a complex data type. Example: time: (5.0, "seconds")',
        domain=_VEHICLE_LIKE,
        unit="seconds (s)",
        structure={
            "value": StructureField("float", "seconds (s)", "Time value"),
            "unit": StructureField("string", None, "Time unit (seconds, minutes, hours)"),
        },
    ),
    AttributeTypeSchema(
        name="gps",
        data_type="complex",
        complex_type="gps",
        description="GPS coordinates as a complex data type.",
        domain=("Vehicle", "Drone", "Satellite"),
        unit="degrees, meters",
        structure={
            "lat": StructureField("float", "degrees", "Latitude coordinate"),
            "long": StructureField("float", "degrees", "Longitude coordinate"),
            "alt": StructureField("float", "meters (m)", "Altitude above sea level"),
            "timestamp": StructureField("datetime", None, "GPS timestamp"),
        },
    ),
)

TRANSITION_TYPES: Tuple[TransitionTypeSchema, ...] = (
    TransitionTypeSchema("transform", "Transform one entity into another", ("individual",), ("individual",)),
    TransitionTypeSchema("create", "Create a new entity", (), ("individual",)),
)

_POSITION = ("position x", "position y", "position z")
_PREVIOUS = ("previous position x", "previous position y", "previous position z")
_INITIAL = ("initial position x", "initial position y", "initial position z")
_MOTION_SCOPE = ("Object", "Particle", "Vehicle", "class")

FUNCTION_TYPES: Tuple[FunctionTypeSchema, ...] = (
    FunctionTypeSchema(
        name="atomicMass",
        expression='"number of protons" + "number of neutrons"',
        scope=("Element", "class"),
    ),
    FunctionTypeSchema(
        name="distance",
        expression=(
            'let $x_1$ be "position x"; let $y_1$ be "position y"; let $z_1$ be "position z"; '
            'let $x_2$ be "previous position x"; let $y_2$ be "previous position y"; '
            'let $z_2$ be "previous position z"; let delta_x be $x_1$ - $x_2$; '
            "let delta_y be $y_1$ - $y_2$; let delta_z be $z_1$ - $z_2$; "
            "sqrt(power(delta_x, 2) + power(delta_y, 2) + power(delta_z, 2))"
        ),
        scope=_MOTION_SCOPE,
        description="Calculates Euclidean distance between two 3D positions using vector notation",
        required_attributes=_POSITION + _PREVIOUS,
    ),
    FunctionTypeSchema(
        name="displacement",
        expression=(
            'let $x$ be "position x"; let $y$ be "position y"; let $z$ be "position z"; '
            'let $x_0$ be "initial position x"; let $y_0$ be "initial position y"; '
            'let $z_0$ be "initial position z"; let delta_x be $x$ - $x_0$; '
            "let delta_y be $y$ - $y_0$; let delta_z be $z$ - $z_0$; "
            "sqrt(power(delta_x, 2) + power(delta_y, 2) + power(delta_z, 2))"
        ),
        scope=_MOTION_SCOPE,
        description="Calculates displacement from initial position to current position using vector notation",
        required_attributes=_POSITION + _INITIAL,
    ),
    FunctionTypeSchema(
        name="speed",
        expression=(
            'let $x_1$ be "position x"; let $y_1$ be "position y"; let $z_1$ be "position z"; '
            'let $x_2$ be "previous position x"; let $y_2$ be "previous position y"; '
            'let $z_2$ be "previous position z"; let $t_1$ be "time"; let $t_2$ be "previous time"; '
            "let distance be sqrt(power($x_1$ - $x_2$, 2) + power($y_1$ - $y_2$, 2) + "
            "power($z_1$ - $z_2$, 2)); let delta_t be $t_1$ - $t_2$; distance / delta_t"
        ),
        scope=_MOTION_SCOPE,
        description="Calculates speed (distance traveled over time) using intermediate variables",
        required_attributes=_POSITION + _PREVIOUS + ("time", "previous time"),
    ),
    FunctionTypeSchema(
        name="velocity_magnitude",
        expression=(
            'let $x$ be "position x"; let $y$ be "position y"; let $z$ be "position z"; '
            'let $x_0$ be "initial position x"; let $y_0$ be "initial position y"; '
            'let $z_0$ be "initial position z"; let $t_1$ be "time"; let $t_2$ be "previous time"; '
            "let displacement be sqrt(power($x$ - $x_0$, 2) + power($y$ - $y_0$, 2) + "
            "power($z$ - $z_0$, 2)); let delta_t be $t_1$ - $t_2$; displacement / delta_t"
        ),
        scope=_MOTION_SCOPE,
        description="Calculates velocity magnitude (displacement over time) using intermediate variables",
        required_attributes=_POSITION + _INITIAL + ("time", "previous time"),
    ),
    FunctionTypeSchema(
        name="acceleration",
        expression=(
            'let $t_1$ be "time"; let $t_2$ be "previous time"; let $t_3$ be "previous previous time"; '
            "let velocity_1 be distance(position, previous position) / ($t_1$ - $t_2$); "
            "let velocity_2 be distance(previous position, previous previous position) / ($t_2$ - $t_3$); "
            "(velocity_1 - velocity_2) / ($t_1$ - $t_2$)"
        ),
        scope=_MOTION_SCOPE,
        description="Calculates acceleration (change in velocity over time) using intermediate variables",
        required_attributes=_POSITION
        + _PREVIOUS
        + (
            "previous previous position x",
            "previous previous position y",
            "previous previous position z",
            "time",
            "previous time",
            "previous previous time",
        ),
    ),
)


# ── Catalog ──────────────────────────────────────────────────────────────────

_T = TypeVar("_T", NodeTypeSchema, RelationTypeSchema, AttributeTypeSchema, TransitionTypeSchema, FunctionTypeSchema)


def merge_by_name(defaults: Iterable[_T], user: Iterable[_T]) -> List[_T]:
    """Merge two schema lists; a user entry replaces the same-named default."""
    merged: Dict[str, _T] = {}
    for item in defaults:
        merged[item.name] = item
    for item in user:
        merged[item.name] = item
    return list(merged.values())


@dataclass
class SchemaCatalog:
    """Container for the five schema dictionaries with name lookups."""

    node_types: List[NodeTypeSchema] = field(default_factory=lambda: list(NODE_TYPES))
    relation_types: List[RelationTypeSchema] = field(default_factory=lambda: list(RELATION_TYPES))
    attribute_types: List[AttributeTypeSchema] = field(default_factory=lambda: list(ATTRIBUTE_TYPES))
    transition_types: List[TransitionTypeSchema] = field(default_factory=lambda: list(TRANSITION_TYPES))
    function_types: List[FunctionTypeSchema] = field(default_factory=lambda: list(FUNCTION_TYPES))

    @classmethod
    def empty(cls) -> "SchemaCatalog":
        return cls([], [], [], [], [])

    def merged_with(self, user: Optional["SchemaCatalog"]) -> "SchemaCatalog":
        """Return a new catalog with *user* entries overriding same-named ones."""
        if user is None:
            return SchemaCatalog(
                list(self.node_types),
                list(self.relation_types),
                list(self.attribute_types),
                list(self.transition_types),
                list(self.function_types),
            )
        return SchemaCatalog(
            merge_by_name(self.node_types, user.node_types),
            merge_by_name(self.relation_types, user.relation_types),
            merge_by_name(self.attribute_types, user.attribute_types),
            merge_by_name(self.transition_types, user.transition_types),
            merge_by_name(self.function_types, user.function_types),
        )

    def node_type(self, name: str) -> Optional[NodeTypeSchema]:
        return _find(self.node_types, name)

    def relation_type(self, name: str) -> Optional[RelationTypeSchema]:
        found = _find(self.relation_types, name)
        if found is not None:
            return found
        for rel in self.relation_types:
            if name in rel.aliases:
                return rel
        return None

    def attribute_type(self, name: str) -> Optional[AttributeTypeSchema]:
        return _find(self.attribute_types, name)

    def transition_type(self, name: str) -> Optional[TransitionTypeSchema]:
        return _find(self.transition_types, name)

    def function_type(self, name: str) -> Optional[FunctionTypeSchema]:
        return _find(self.function_types, name)

    def role_ancestors(self, role: str) -> List[str]:
        """Return *role* followed by all ancestor roles (breadth first)."""
        seen: List[str] = [role]
        queue = [role]
        while queue:
            current = self.node_type(queue.pop(0))
            if current is None:
                continue
            for parent in current.parent_types:
                if parent not in seen:
                    seen.append(parent)
                    queue.append(parent)
        return seen


def _find(items: Sequence[_T], name: str) -> Optional[_T]:
    for item in items:
        if item.name == name:
            return item
    return None


def default_catalog() -> SchemaCatalog:
    return SchemaCatalog()
