"""
ER Model Classes - Represent entities, fields, and relations recovered from JPA sources
"""
from enum import Enum
from typing import Any, Dict, Iterable, NamedTuple, Optional, Tuple


class RelationKind(Enum):
    """The four JPA association annotations"""

    ONE_TO_MANY = 'OneToMany'
    MANY_TO_ONE = 'ManyToOne'
    ONE_TO_ONE = 'OneToOne'
    MANY_TO_MANY = 'ManyToMany'

    @classmethod
    def from_annotation(cls, name: str) -> Optional['RelationKind']:
        """Map an annotation name (``OneToMany``, ``javax.persistence.OneToMany``) to a kind"""
        simple_name = name.rsplit('.', 1)[-1]
        for kind in cls:
            if kind.value == simple_name:
                return kind
        return None

    @property
    def type_key(self) -> str:
        """Key shared by reciprocal kinds; OneToMany and ManyToOne describe the same association"""
        return _TYPE_KEYS[self]


_TYPE_KEYS = {
    RelationKind.ONE_TO_MANY: 'OneToMany/ManyToOne',
    RelationKind.MANY_TO_ONE: 'OneToMany/ManyToOne',
    RelationKind.ONE_TO_ONE: 'OneToOne',
    RelationKind.MANY_TO_MANY: 'ManyToMany',
}


class Field(NamedTuple):
    """A persistent attribute of an entity"""

    name: str
    type: str

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'type': self.type}


class Relation(NamedTuple):
    """An association to another entity; target is always upper-cased"""

    kind: RelationKind
    target: str

    def to_dict(self) -> Dict[str, str]:
        return {'kind': self.kind.value, 'target': self.target}


class Entity:
    """Represents an entity (annotated class) in the ER diagram"""

    def __init__(self, name: str, fields: Iterable[Field] = (),
                 relations: Iterable[Relation] = ()):
        self._name = name
        self._fields = tuple(fields)
        self._relations = tuple(relations)

    @property
    def name(self) -> str:
        return self._name

    @property
    def fields(self) -> Tuple[Field, ...]:
        return self._fields

    @property
    def relations(self) -> Tuple[Relation, ...]:
        return self._relations

    @property
    def node_id(self) -> str:
        """Identifier used for diagram nodes and relation endpoints"""
        return self._name.upper()

    def get_field(self, name: str) -> Optional[Field]:
        """Look up a field by name"""
        for field in self._fields:
            if field.name == name:
                return field
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Converts the entity to a dictionary."""
        return {
            'name': self._name,
            'fields': [field.to_dict() for field in self._fields],
            'relations': [relation.to_dict() for relation in self._relations],
        }

    def __eq__(self, other):
        if not isinstance(other, Entity):
            return NotImplemented
        return (self._name, self._fields, self._relations) == \
            (other._name, other._fields, other._relations)

    def __hash__(self):
        return hash((self._name, self._fields, self._relations))

    def __repr__(self):
        return (f"Entity(name={self._name}, fields={len(self._fields)}, "
                f"relations={len(self._relations)})")


def relation_key(source: str, target: str, kind: RelationKind) -> str:
    """
    Build the deduplication key for a relation line

    The endpoints are sorted so that a relation declared from either side of
    an association produces the same key.

    Args:
        source: Upper-cased source entity name
        target: Upper-cased target entity name
        kind: Relation kind

    Returns:
        Key of the form ``A<->TYPEKEY<->B``
    """
    first, second = sorted((source, target))
    return f"{first}<->{kind.type_key}<->{second}"


def iter_unique_relations(entities: Iterable[Entity]):
    """
    Yield ``(source, relation)`` pairs in declaration order, skipping reciprocal duplicates

    Args:
        entities: Entities in diagram order

    Yields:
        Tuple of (upper-cased source name, Relation with upper-cased target)
    """
    seen = set()
    for entity in entities:
        source = entity.node_id
        for relation in entity.relations:
            target = relation.target.upper()
            key = relation_key(source, target, relation.kind)
            if key in seen:
                continue
            seen.add(key)
            yield source, Relation(relation.kind, target)
