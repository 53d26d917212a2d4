#!/usr/bin/env python3
"""
JPA to ER Diagram Converter - Main Program
Converts @Entity annotated Java classes to Entity-Relationship diagrams
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

import graphviz

from jpa_to_er.core import parse_sources, generate_mermaid, to_dot, render_er_diagram
from jpa_to_er.core.constants import SOURCE_SUFFIX
from jpa_to_er.core.visualization import IMAGE_FORMATS

TEXT_FORMATS = ('mermaid', 'dot')
DEFAULT_IMAGE_NAME = "er_diagram"


def status(message: str):
    """Progress output goes to stderr so stdout can carry the diagram"""
    print(message, file=sys.stderr)


def collect_sources(inputs: List[str]) -> Dict[str, str]:
    """
    Read Java sources from files, directories and stdin

    Args:
        inputs: File paths, directory paths (searched recursively for .java files) or '-'

    Returns:
        Ordered mapping of unit name -> source text

    Raises:
        FileNotFoundError: If an input path does not exist
    """
    units = {}
    for item in inputs:
        if item == "-":
            units["<stdin>"] = sys.stdin.read()
            continue

        path = Path(item)
        if not path.exists():
            raise FileNotFoundError(item)
        if path.is_dir():
            files = sorted(path.rglob(f"*{SOURCE_SUFFIX}"))
        else:
            files = [path]
        for file in files:
            units[str(file)] = file.read_text(encoding="utf-8", errors="replace")
    return units


def java_to_er(units: Dict[str, str], fmt: str = "mermaid", output: Optional[str] = None,
               use_corpus: bool = True, extra_value_types=(), view: bool = False) -> Optional[str]:
    """
    Convert Java sources to an ER diagram

    Args:
        units: Mapping of unit name -> Java source text
        fmt: One of mermaid, dot, png, svg, pdf
        output: Output file path; text formats go to stdout when omitted,
            image formats default to "er_diagram" (paths are without extension)
        use_corpus: Expand @Embedded fields from the other sources
        extra_value_types: Additional type names treated as plain values
        view: Open rendered images after writing

    Returns:
        Diagram text for text formats, the written path for images,
        None when no entity was found
    """
    status(f"🔍 Parsing {len(units)} Java source(s)...")
    entities, error = parse_sources(units, use_corpus, extra_value_types)

    if not entities:
        status(f"❌ {error}")
        return None

    status(f"✅ Found {len(entities)} entit{'y' if len(entities) == 1 else 'ies'}:")
    for entity in entities:
        status(f"   - {entity.name} ({len(entity.fields)} fields, {len(entity.relations)} relations)")

    status(f"\n🎨 Rendering {fmt} diagram...")
    if fmt in IMAGE_FORMATS:
        output_path = render_er_diagram(entities, output or DEFAULT_IMAGE_NAME, fmt, view)
        status(f"\n✅ ER diagram saved to: {output_path}")
        return output_path

    diagram = generate_mermaid(entities) if fmt == "mermaid" else to_dot(entities)
    if output:
        Path(output).write_text(diagram, encoding="utf-8")
        status(f"\n✅ ER diagram saved to: {output}")
    else:
        sys.stdout.write(diagram)
    return diagram


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jpa-to-er",
        description="Convert JPA @Entity classes to ER diagrams"
    )
    parser.add_argument(
        "inputs",
        nargs="+",
        help="Java file, directory of Java files, or '-' for stdin"
    )
    parser.add_argument(
        "-o", "--output",
        help="Output file (without extension for image formats); stdout if omitted"
    )
    parser.add_argument(
        "-f", "--format",
        choices=TEXT_FORMATS + IMAGE_FORMATS,
        default="mermaid",
        help="Diagram format"
    )
    parser.add_argument(
        "--no-corpus",
        action="store_true",
        help="Don't expand @Embedded fields from the other sources"
    )
    parser.add_argument(
        "--value-type",
        action="append",
        default=[],
        metavar="NAME",
        help="Treat NAME as a plain value type instead of an entity (repeatable)"
    )
    parser.add_argument(
        "--view",
        action="store_true",
        help="Open the diagram after rendering (image formats)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    return parser


def main(argv=None):
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s"
    )

    if args.format in IMAGE_FORMATS and not args.output:
        parser.error(f"--output is required for {args.format} output")

    try:
        units = collect_sources(args.inputs)
    except FileNotFoundError as e:
        status(f"❌ Error: File not found: {e}")
        sys.exit(1)

    if "<stdin>" in units:
        status("📝 Read Java source from stdin")
    else:
        status(f"📝 Reading Java sources from: {', '.join(args.inputs)}")

    try:
        result = java_to_er(
            units,
            fmt=args.format,
            output=args.output,
            use_corpus=not args.no_corpus,
            extra_value_types=args.value_type,
            view=args.view
        )
    except (graphviz.ExecutableNotFound, graphviz.CalledProcessError, OSError) as e:
        status(f"\n❌ Error: {e}")
        sys.exit(1)

    if result is None:
        sys.exit(1)


if __name__ == "__main__":
    main()
