"""
ER Diagram Visualization Module - Renders entity diagrams using Graphviz
"""
import os
import re
from typing import Iterable, List

import graphviz

from .er_model import Entity, RelationKind, iter_unique_relations

# (arrowtail, arrowhead) in crow's foot notation
ARROWS = {
    RelationKind.ONE_TO_MANY: ('teetee', 'crowodot'),
    RelationKind.MANY_TO_ONE: ('crowodot', 'teetee'),
    RelationKind.ONE_TO_ONE: ('teetee', 'teetee'),
    RelationKind.MANY_TO_MANY: ('crowtee', 'crowtee'),
}

IMAGE_FORMATS = ('png', 'svg', 'pdf')

_RECORD_SPECIAL = re.compile(r'([{}|<>\\"])')


def escape_record(text: str) -> str:
    """Escape characters with a meaning inside record labels"""
    return _RECORD_SPECIAL.sub(r'\\\1', text)


class ERDiagramRenderer:
    """Renders ER diagrams using Graphviz"""

    def __init__(self, name: str = "ER_Diagram", fmt: str = "png"):
        self.dot = graphviz.Digraph(name, format=fmt)
        self.dot.attr(rankdir="LR")
        self.dot.attr("node", fontname="Arial", fontsize="10", shape="record",
                      style="filled", fillcolor="lightblue")
        self.dot.attr("edge", arrowsize="0.8", penwidth="1.2", dir="both")

    def render_entities(self, entities: Iterable[Entity]):
        """Render entities as record nodes listing their fields"""
        for entity in entities:
            field_lines = "".join(
                f"{escape_record(field.type)} {escape_record(field.name)}\\l"
                for field in entity.fields
            )
            self.dot.node(
                entity.node_id,
                label=f"{{{escape_record(entity.name)}|{field_lines}}}"
            )

    def render_relationships(self, entities: Iterable[Entity]):
        """Render relations between entities, one edge per association"""
        for source, relation in iter_unique_relations(entities):
            arrowtail, arrowhead = ARROWS[relation.kind]
            self.dot.edge(
                source,
                relation.target,
                arrowtail=arrowtail,
                arrowhead=arrowhead,
                tooltip=relation.kind.value
            )

    @property
    def source(self) -> str:
        """DOT source of the diagram"""
        return self.dot.source

    def save(self, filename: str = "er_diagram", fmt: str = None, view: bool = False) -> str:
        """Render the diagram to an image file; requires the Graphviz binaries"""
        directory = os.path.dirname(filename)
        if directory:
            os.makedirs(directory, exist_ok=True)
        return self.dot.render(filename, format=fmt, view=view, cleanup=True)


def _build(entities: List[Entity], name: str, fmt: str = "png") -> ERDiagramRenderer:
    renderer = ERDiagramRenderer(name, fmt)
    renderer.render_entities(entities)
    renderer.render_relationships(entities)
    return renderer


def to_dot(entities: Iterable[Entity], name: str = "ER_Diagram") -> str:
    """DOT source for the given entities"""
    return _build(list(entities), name).source


def render_er_diagram(entities: Iterable[Entity],
                      output_name: str = "er_diagram",
                      fmt: str = "png",
                      view: bool = False) -> str:
    """
    Convenience function to render an ER diagram

    Args:
        entities: Entities in diagram order
        output_name: Output path without extension
        fmt: Image format understood by Graphviz
        view: Whether to open the diagram after rendering

    Returns:
        Path to the generated image file
    """
    renderer = _build(list(entities), os.path.basename(output_name) or "ER_Diagram", fmt)
    return renderer.save(output_name, fmt, view)
