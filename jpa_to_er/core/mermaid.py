"""
Mermaid erDiagram generation
"""
from typing import Iterable

from .constants import DIAGRAM_HEADER
from .er_model import Entity, RelationKind, iter_unique_relations

CONNECTORS = {
    RelationKind.ONE_TO_MANY: '||--o{',
    RelationKind.MANY_TO_ONE: '}o--||',
    RelationKind.ONE_TO_ONE: '||--||',
    RelationKind.MANY_TO_MANY: '}|--|{',
}


def get_connector(kind: RelationKind) -> str:
    """Mermaid cardinality connector for a relation kind"""
    return CONNECTORS[kind]


def generate_mermaid(entities: Iterable[Entity], label: str = '""') -> str:
    """
    Convert entities to Mermaid erDiagram text

    Entity blocks come first in input order, followed by one relation line per
    association. Reciprocal declarations (OneToMany on one side, ManyToOne on
    the other, or the same symmetric kind on both sides) produce a single line.

    Args:
        entities: Entities in diagram order
        label: Relation label, quoted Mermaid text

    Returns:
        Diagram text starting with the ``erDiagram`` header
    """
    entities = list(entities)
    output = f"{DIAGRAM_HEADER}\n"

    for entity in entities:
        output += f"  {entity.node_id} {{\n"
        for field in entity.fields:
            output += f"    {field.type} {field.name}\n"
        output += "  }\n\n"

    for source, relation in iter_unique_relations(entities):
        connector = get_connector(relation.kind)
        output += f"  {source} {connector} {relation.target} : {label}\n"

    return output
