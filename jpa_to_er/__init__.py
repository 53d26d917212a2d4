"""
JPA to ER Diagram Converter
"""
__version__ = "0.3.0"
