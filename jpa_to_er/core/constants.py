"""
Java type names treated as plain column values rather than associations
"""

JAVA_PRIMITIVE_TYPES = (
    'byte', 'short', 'int', 'long', 'float', 'double', 'char', 'boolean',
)

JAVA_COMMON_SIMPLE_TYPES = (
    'String', 'Integer', 'Float', 'Double', 'Long', 'Boolean', 'Date',
    'LocalDate', 'LocalDateTime', 'BigDecimal', 'BigInteger',
    'UUID', 'Instant', 'LocalTime', 'Short', 'Byte', 'Character',
    'Timestamp', 'Time', 'Calendar', 'ZonedDateTime', 'OffsetDateTime',
    'OffsetTime', 'Duration', 'Period', 'URL', 'URI', 'Enum', 'Object',
)

JAVA_PRIMITIVE_TYPES_AND_COMMONS = frozenset(JAVA_PRIMITIVE_TYPES + JAVA_COMMON_SIMPLE_TYPES)

# Mermaid erDiagram notation
DIAGRAM_HEADER = 'erDiagram'

SOURCE_SUFFIX = '.java'
