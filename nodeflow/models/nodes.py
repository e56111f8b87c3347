"""Pydantic models describing installed node kinds.

These are the typed schema pieces a node declares (properties, input and
output slots) plus the descriptor the catalog stores and the manifest
projection it serves to API/UI layers.
"""

from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator


# =============================================================================
# SCHEMA DESCRIPTORS
# =============================================================================

class PropertySchema(BaseModel):
    """Schema for one configurable node property."""
    model_config = {"extra": "allow"}  # Node kinds may add UI hints

    type: str = "string"
    label: Optional[str] = None
    description: str = ""
    default: Any = None
    required: bool = False
    options: Optional[List[Any]] = None
    placeholder: Optional[str] = None
    condition: Optional[str] = None


class InputSlot(BaseModel):
    """An input slot on a node kind."""
    name: str = Field(min_length=1)
    type: str = "object"
    description: str = ""
    required: bool = False


class OutputSlot(BaseModel):
    """An output slot on a node kind (e.g. ``main`` or a branch outcome)."""
    name: str = Field(min_length=1)
    type: str = "object"
    description: str = ""


# =============================================================================
# DESCRIPTOR & MANIFEST
# =============================================================================

class NodeManifestEntry(BaseModel):
    """Serializable projection of one node kind, keys in manifest order."""
    id: str
    name: str
    version: str
    category: str
    icon: str
    description: str
    properties: Dict[str, Dict[str, Any]]
    inputs: List[Dict[str, Any]]
    outputs: List[Dict[str, Any]]
    tags: List[str]
    supports_async: bool
    max_execution_time: int


class NodeDescriptor(BaseModel):
    """Static metadata plus capability handle for one node kind.

    Identity is ``id``. ``node`` is the executable object (a ``BaseNode``
    instance); it is excluded from serialization and equality.
    """
    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    id: str = Field(min_length=1)
    name: str
    version: str = "1.0.0"
    category: str = "general"
    icon: str = ""
    description: str = ""
    properties: Dict[str, PropertySchema] = Field(default_factory=dict)
    inputs: Tuple[InputSlot, ...] = ()
    outputs: Tuple[OutputSlot, ...] = ()
    tags: Tuple[str, ...] = ()
    supports_async: bool = False
    max_execution_time: int = Field(default=300, ge=0)
    node: Optional[Any] = Field(default=None, exclude=True, repr=False)

    @field_validator("tags", mode="before")
    @classmethod
    def dedupe_tags(cls, v):
        """Tags form a set; keep first-seen order for stable manifests."""
        if v is None:
            return ()
        return tuple(dict.fromkeys(v))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeDescriptor):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def tag_set(self) -> frozenset:
        return frozenset(self.tags)

    def shares_tags(self, tags) -> bool:
        """True if any of ``tags`` is one of this node's tags."""
        return not self.tag_set.isdisjoint(tags)

    def to_manifest(self) -> Dict[str, Any]:
        """Project into the field-exact manifest entry."""
        return NodeManifestEntry(
            id=self.id,
            name=self.name,
            version=self.version,
            category=self.category,
            icon=self.icon,
            description=self.description,
            properties={
                key: schema.model_dump(exclude_none=True)
                for key, schema in self.properties.items()
            },
            inputs=[slot.model_dump() for slot in self.inputs],
            outputs=[slot.model_dump() for slot in self.outputs],
            tags=list(self.tags),
            supports_async=self.supports_async,
            max_execution_time=self.max_execution_time,
        ).model_dump()
