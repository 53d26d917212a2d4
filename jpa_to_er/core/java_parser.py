"""
Heuristic JPA entity parser - recovers entities, fields and relations from Java source

The parser works line by line on the class body instead of building a syntax
tree. It tolerates arbitrary annotation ordering and incomplete code; lines it
does not recognise are skipped.
"""
import logging
import re
from pathlib import PurePath
from typing import AbstractSet, Dict, Iterable, List, Mapping, Optional, Tuple

from .constants import JAVA_PRIMITIVE_TYPES_AND_COMMONS
from .er_model import Entity, Field, Relation, RelationKind

logger = logging.getLogger(__name__)

_COMMENT_OR_LITERAL = re.compile(
    r'("(?:\\.|[^"\\\n])*"|\'(?:\\.|[^\'\\\n])*\')|//[^\n]*|/\*.*?\*/',
    re.DOTALL
)
_LITERAL = re.compile(r'"(?:\\.|[^"\\])*"|\'(?:\\.|[^\'\\])*\'')

ENTITY_MARKER = re.compile(r'@(?:[\w.]+\.)?Entity\b')
CLASS_DECL = re.compile(r'\bclass\s+(\w+)')

# @Name with an optional argument list balanced on the same line
_ANNOTATION = re.compile(r'@([\w.]+)\s*(\((?:[^()]|\([^()]*\))*\))?\s*')

_TYPE = r'(\w[\w.]*(?:\s*<[\w<>?,.\[\]\s]*>)?(?:\s*\[\s*\])*)'
_FIELD_MODIFIERS = r'public|protected|private|static|final|transient|volatile'
_METHOD_MODIFIERS = r'public|protected|private|static|final|abstract|synchronized'

FIELD_DECL = re.compile(
    r'^((?:(?:' + _FIELD_MODIFIERS + r')\s+)*)'
    r'(?!(?:' + _FIELD_MODIFIERS + r'|return|new)\b)'
    + _TYPE +
    r'\s+(\w+)\s*(?:=[^;]*)?;'
)
ACCESSOR_DECL = re.compile(
    r'^(?:(?:' + _METHOD_MODIFIERS + r')\s+)*'
    r'(?!(?:' + _METHOD_MODIFIERS + r'|void|return|new)\b)'
    + _TYPE +
    r'\s+(\w+)\s*\(\s*\)'
)

_LIST_OR_SET = re.compile(r'^(List|Set)<(\w+)>$')
_MAP = re.compile(r'^Map<\w+,(\w+)>$')
_CUSTOM_TYPE = re.compile(r'^[A-Z]\w+$')

ENUMERATED = 'enumerated'
EMBEDDED = 'embedded'
_SPECIAL_MARKERS = {
    'Enumerated': ENUMERATED,
    'Embedded': EMBEDDED,
    'EmbeddedId': EMBEDDED,
}


def strip_comments(content: str) -> str:
    """Remove // and /* */ comments, leaving string and char literals untouched"""
    def _replace(match):
        if match.group(1):
            return match.group(1)
        # keep line structure so declarations around a block comment stay on their own lines
        return '\n' * match.group(0).count('\n')

    return _COMMENT_OR_LITERAL.sub(_replace, content)


def is_custom_type(type_name: str,
                   value_types: AbstractSet[str] = JAVA_PRIMITIVE_TYPES_AND_COMMONS) -> bool:
    """A capitalised simple type name that is not a primitive or common value type"""
    return bool(_CUSTOM_TYPE.match(type_name)) and type_name not in value_types


def normalize_collection(raw_type: str) -> Tuple[str, Optional[str], Optional[str]]:
    """
    Unwrap List<T>, Set<T> and Map<K,T>

    Args:
        raw_type: Type with whitespace already removed

    Returns:
        Tuple of (field type, collection kind, element type). For a non-collection
        type the raw type is returned with kind and element set to None.
    """
    match = _LIST_OR_SET.match(raw_type)
    if match:
        kind, element = match.groups()
        return f"{kind}_{element}", kind, element
    match = _MAP.match(raw_type)
    if match:
        element = match.group(1)
        return f"Map_{element}", 'Map', element
    return raw_type, None, None


def accessor_field_name(method_name: str) -> str:
    """getCartItems -> cartItems, isActive -> active"""
    for prefix in ('get', 'is'):
        if method_name.startswith(prefix) and len(method_name) > len(prefix):
            rest = method_name[len(prefix):]
            return rest[0].lower() + rest[1:]
    return method_name


def _class_pattern(type_name: str):
    return re.compile(r'\bclass\s+' + re.escape(type_name) + r'\b')


def find_type_source(corpus: Mapping[str, str], type_name: str) -> Optional[str]:
    """
    Find the corpus entry declaring ``class <type_name>``

    An entry whose unit name stem matches the type name is preferred,
    otherwise the first declaring entry in corpus order wins.
    """
    pattern = _class_pattern(type_name)
    candidates = []
    for unit_name, text in corpus.items():
        if PurePath(unit_name).stem == type_name:
            candidates.insert(0, text)
        else:
            candidates.append(text)
    for text in candidates:
        if pattern.search(strip_comments(text)):
            return text
    return None


def _split_annotations(code: str) -> Tuple[List[str], str]:
    """Split leading annotations off a line; returns (simple names, remaining text)"""
    names = []
    rest = code
    while rest.startswith('@'):
        match = _ANNOTATION.match(rest)
        if not match:
            break
        names.append(match.group(1).rsplit('.', 1)[-1])
        rest = rest[match.end():]
    return names, rest


def _balance(code: str) -> int:
    return (code.count('(') + code.count('{')) - (code.count(')') + code.count('}'))


def _close_annotation(code: str, depth: int) -> Tuple[int, str]:
    """Consume an open annotation argument list; returns (depth left, text after it)"""
    for index, char in enumerate(code):
        if char in '({':
            depth += 1
        elif char in ')}':
            depth -= 1
            if depth == 0:
                return 0, code[index + 1:].strip()
    return depth, ''


class _EntityBuilder:
    """Collects fields (first declaration wins) and relations in source order"""

    def __init__(self):
        self.fields: List[Field] = []
        self.relations: List[Relation] = []
        self._names = set()

    def add_field(self, name: str, field_type: str):
        if name in self._names:
            return
        self._names.add(name)
        self.fields.append(Field(name, field_type))

    def add_relation(self, kind: RelationKind, target: str):
        self.relations.append(Relation(kind, target.upper()))

    def build(self, name: str) -> Entity:
        return Entity(name, self.fields, self.relations)


class _BodyScanner:
    """Scans one class body; holds the read-only inputs shared by every line"""

    def __init__(self, corpus: Optional[Mapping[str, str]],
                 value_types: AbstractSet[str], expanding: AbstractSet[str]):
        self.corpus = corpus
        self.value_types = value_types
        self.expanding = expanding
        self.builder = _EntityBuilder()

    def scan(self, body: str) -> _EntityBuilder:
        depth = 1
        annotation_depth = 0
        pending: Optional[RelationKind] = None
        prev_markers = frozenset()

        for raw_line in body.split('\n'):
            code = _LITERAL.sub('""', raw_line.strip())

            if annotation_depth > 0:
                # argument list of a multi-line annotation
                annotation_depth, code = _close_annotation(code, annotation_depth)
                if annotation_depth > 0 or not code:
                    continue

            names, decl = _split_annotations(code)
            if names and decl.startswith('('):
                annotation_depth = max(0, _balance(code))
                decl = ''

            if depth != 1:
                pending = None
                prev_markers = frozenset()
            else:
                markers = frozenset(_SPECIAL_MARKERS[name] for name in names
                                    if name in _SPECIAL_MARKERS)
                for name in names:
                    kind = RelationKind.from_annotation(name)
                    if kind is not None:
                        pending = kind

                if decl:
                    pending = self._declaration(decl, pending, markers | prev_markers)
                    prev_markers = frozenset()
                elif names:
                    # markers carry across the run of annotation lines above a declaration
                    prev_markers = prev_markers | markers

            depth += decl.count('{') - decl.count('}')
            if depth <= 0:
                break

        return self.builder

    def _declaration(self, decl: str, pending: Optional[RelationKind],
                     markers: AbstractSet[str]) -> Optional[RelationKind]:
        """Handle a depth-1 declaration line; returns the pending relation left afterwards"""
        match = FIELD_DECL.match(decl)
        if match:
            modifiers, raw_type, name = match.groups()
            if 'static' not in modifiers.split():
                self._field(name, re.sub(r'\s+', '', raw_type), pending, markers)
            return None

        if pending is not None:
            match = ACCESSOR_DECL.match(decl)
            if match:
                raw_type, method_name = match.groups()
                field_type, _, element = normalize_collection(re.sub(r'\s+', '', raw_type))
                self.builder.add_relation(pending, element or field_type)
                self.builder.add_field(accessor_field_name(method_name), field_type)
        return None

    def _field(self, name: str, raw_type: str, pending: Optional[RelationKind],
               markers: AbstractSet[str]):
        builder = self.builder

        if EMBEDDED in markers:
            for field in self._expand_embedded(name, raw_type) or [Field(name, raw_type)]:
                builder.add_field(field.name, field.type)
            return
        if ENUMERATED in markers:
            builder.add_field(name, raw_type)
            return

        field_type, kind, element = normalize_collection(raw_type)
        if pending is not None:
            builder.add_relation(pending, element or raw_type)
        elif kind == 'List':
            builder.add_relation(RelationKind.ONE_TO_MANY, element)
        elif is_custom_type(raw_type, self.value_types):
            builder.add_relation(RelationKind.MANY_TO_ONE, raw_type)
        builder.add_field(name, field_type)

    def _expand_embedded(self, name: str, raw_type: str) -> Optional[List[Field]]:
        """Flatten an embedded type found in the corpus into <name>_<innerField> fields"""
        if self.corpus is None or raw_type in self.expanding:
            return None
        source = find_type_source(self.corpus, raw_type)
        if source is None:
            logger.debug(f"Embedded type {raw_type} not found in corpus, keeping {name} opaque")
            return None
        inner = _extract(source, self.corpus, self.value_types,
                         self.expanding | {raw_type}, type_name=raw_type)
        if inner is None or not inner.fields:
            return None
        return [Field(f"{name}_{field.name}", field.type) for field in inner.fields]


def _extract(content: str, corpus: Optional[Mapping[str, str]],
             value_types: AbstractSet[str], expanding: AbstractSet[str],
             type_name: Optional[str] = None) -> Optional[Entity]:
    content = strip_comments(content)

    if type_name is None:
        marker = ENTITY_MARKER.search(content)
        if not marker:
            return None
        class_match = CLASS_DECL.search(content, marker.end())
    else:
        # nested extraction of an embeddable: no @Entity required
        class_match = _class_pattern(type_name).search(content)
    if not class_match:
        return None

    name = type_name or class_match.group(1)
    body_start = content.find('{', class_match.end())
    if body_start == -1:
        return None

    scanner = _BodyScanner(corpus, value_types, expanding | {name})
    return scanner.scan(content[body_start + 1:]).build(name)


def extract_entity(content: str, corpus: Optional[Mapping[str, str]] = None,
                   extra_value_types: Iterable[str] = ()) -> Optional[Entity]:
    """
    Extract the @Entity class declared in one Java source unit

    Args:
        content: Java source text
        corpus: Optional read-only map of unit name -> source text used to
            expand @Embedded fields into their component fields
        extra_value_types: Additional type names to treat as plain values

    Returns:
        The Entity, or None when the text declares no @Entity class
    """
    value_types = JAVA_PRIMITIVE_TYPES_AND_COMMONS | frozenset(extra_value_types)
    return _extract(content, corpus, value_types, frozenset())


def extract_all(units: Mapping[str, str], use_corpus: bool = True,
                extra_value_types: Iterable[str] = ()) -> Dict[str, Optional[Entity]]:
    """
    Run the extractor over every unit, using all units as the corpus

    Returns:
        Ordered mapping of unit name -> Entity (None for ineligible units)
    """
    corpus = units if use_corpus else None
    extra_value_types = tuple(extra_value_types)
    results = {}
    for unit_name, content in units.items():
        entity = extract_entity(content, corpus, extra_value_types)
        if entity is None:
            logger.debug(f"Skipping {unit_name}: no @Entity class")
        results[unit_name] = entity
    return results


def parse_sources(units: Mapping[str, str], use_corpus: bool = True,
                  extra_value_types: Iterable[str] = ()) -> Tuple[List[Entity], str]:
    """
    Parse a set of Java sources into entities

    Args:
        units: Ordered mapping of unit name -> source text
        use_corpus: Expand @Embedded fields using the other units
        extra_value_types: Additional type names to treat as plain values

    Returns:
        Tuple of (entities in unit order, error message). The error message is
        empty on success.
    """
    try:
        results = extract_all(units, use_corpus, extra_value_types)
        entities = [entity for entity in results.values() if entity is not None]
        if not entities:
            return [], "No @Entity classes found in the provided sources."

        logger.info(f"Parsed {len(entities)} entities from {len(units)} source units")
        return entities, ""

    except Exception as e:
        logger.exception("Unexpected error while parsing Java sources")
        return [], f"Parse error: {e}"
