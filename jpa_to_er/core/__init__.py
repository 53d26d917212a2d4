"""
JPA entities to ER Diagram Converter Package
"""
from .java_parser import extract_entity, extract_all, parse_sources, strip_comments, is_custom_type

from .er_model import Entity, Field, Relation, RelationKind, relation_key
from .mermaid import generate_mermaid
from .visualization import render_er_diagram, to_dot, ERDiagramRenderer

__all__ = [
    'extract_entity',
    'extract_all',
    'parse_sources',
    'strip_comments',
    'is_custom_type',
    'Entity',
    'Field',
    'Relation',
    'RelationKind',
    'relation_key',
    'generate_mermaid',
    'render_er_diagram',
    'to_dot',
    'ERDiagramRenderer'
]
