"""
Data models for processed document content.
"""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class EntityType(str, Enum):
    PERSON = "PERSON"
    ORGANIZATION = "ORGANIZATION"
    LOCATION = "LOCATION"
    DATE = "DATE"
    CONCEPT = "CONCEPT"
    TERM = "TERM"


class RelationshipKind(str, Enum):
    CAUSAL = "causal"
    HIERARCHICAL = "hierarchical"
    TEMPORAL = "temporal"
    DEFINITIONAL = "definitional"


class ContentDifficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


def _clamp_importance(value: Any, default: int = 5) -> int:
    try:
        importance = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return default
    return max(1, min(10, importance))


def _text(value: Any) -> str:
    return str(value).strip() if value is not None else ""


def _str_tuple(values: Any) -> Tuple[str, ...]:
    if isinstance(values, str):
        values = [values]
    if not isinstance(values, (list, tuple)):
        return ()
    return tuple(_text(v) for v in values if _text(v))


@dataclass(frozen=True)
class Entity:
    """Named thing extracted from the text"""
    text: str
    type: EntityType = EntityType.TERM
    context: str = ""
    importance: int = 5  # 1-10

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["Entity"]:
        text = _text(data.get("text") or data.get("name"))
        if not text:
            return None
        try:
            entity_type = EntityType(_text(data.get("type")).upper())
        except ValueError:
            entity_type = EntityType.TERM
        return cls(
            text=text,
            type=entity_type,
            context=_text(data.get("context")),
            importance=_clamp_importance(data.get("importance")),
        )


@dataclass(frozen=True)
class Concept:
    """Higher-level idea with a description"""
    name: str
    description: str = ""
    related_terms: Tuple[str, ...] = ()
    importance: int = 5  # 1-10

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["Concept"]:
        name = _text(data.get("name"))
        if not name:
            return None
        return cls(
            name=name,
            description=_text(data.get("description")),
            related_terms=_str_tuple(data.get("relatedTerms", data.get("related_terms"))),
            importance=_clamp_importance(data.get("importance")),
        )


@dataclass(frozen=True)
class Relationship:
    """Directed subject-predicate-object link"""
    subject: str
    predicate: str
    object: str
    sentence: str = ""
    kind: RelationshipKind = RelationshipKind.DEFINITIONAL

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["Relationship"]:
        subject = _text(data.get("subject"))
        predicate = _text(data.get("predicate"))
        obj = _text(data.get("object"))
        if not (subject and predicate and obj):
            return None
        try:
            kind = RelationshipKind(_text(data.get("type", data.get("kind"))).lower())
        except ValueError:
            kind = RelationshipKind.DEFINITIONAL
        return cls(
            subject=subject,
            predicate=predicate,
            object=obj,
            sentence=_text(data.get("sentence")),
            kind=kind,
        )

    def as_triple_text(self) -> str:
        return f"{self.subject} {self.predicate} {self.object}"


@dataclass(frozen=True)
class SemanticChunk:
    """Topic-tagged contiguous span of the cleaned text"""
    id: str
    content: str
    topic: str
    start_index: int
    end_index: int
    concepts: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ContentMetadata:
    word_count: int = 0
    reading_level: str = "college"
    topics: Tuple[str, ...] = ("General",)
    key_terms: Tuple[str, ...] = ()
    difficulty: ContentDifficulty = ContentDifficulty.INTERMEDIATE


@dataclass(frozen=True)
class ProcessedContent:
    """Result of one document-processing run"""
    document_id: str
    raw_text: str
    cleaned_text: str
    entities: Tuple[Entity, ...] = ()
    concepts: Tuple[Concept, ...] = ()
    relationships: Tuple[Relationship, ...] = ()
    semantic_chunks: Tuple[SemanticChunk, ...] = ()
    metadata: ContentMetadata = field(default_factory=ContentMetadata)

    def to_dict(self) -> Dict[str, Any]:
        """Plain JSON-ready dict (enums as their values)."""
        data = asdict(self)
        for entity in data["entities"]:
            entity["type"] = entity["type"].value
        for relationship in data["relationships"]:
            relationship["kind"] = relationship["kind"].value
        data["metadata"]["difficulty"] = data["metadata"]["difficulty"].value
        return _lists(data)


def _lists(value: Any) -> Any:
    """Recursively turn tuples into lists for JSON output."""
    if isinstance(value, dict):
        return {k: _lists(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_lists(v) for v in value]
    return value


def entities_from_list(items: Any) -> List[Entity]:
    if not isinstance(items, list):
        return []
    parsed = (Entity.from_dict(item) for item in items if isinstance(item, dict))
    return [e for e in parsed if e is not None]


def concepts_from_list(items: Any) -> List[Concept]:
    if not isinstance(items, list):
        return []
    parsed = (Concept.from_dict(item) for item in items if isinstance(item, dict))
    return [c for c in parsed if c is not None]


def relationships_from_list(items: Any) -> List[Relationship]:
    if not isinstance(items, list):
        return []
    parsed = (Relationship.from_dict(item) for item in items if isinstance(item, dict))
    return [r for r in parsed if r is not None]
