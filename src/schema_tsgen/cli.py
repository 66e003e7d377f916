"""Generate TypeScript declarations from document schema modules.

Usage:
    schema-tsgen models/                          # writes src/interfaces/mongoose.gen.ts
    schema-tsgen models/ -o types/db.gen.ts       # writes to a specific file
    schema-tsgen models/ --augment                # writes src/interfaces/index.d.ts
    schema-tsgen models/user.py -d                # prints to stdout
    schema-tsgen models/ -t function_types.json   # uses inferred signatures
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from schema_tsgen.assembler import generate_file_string
from schema_tsgen.loader import find_model_paths, load_function_types, load_schemas
from schema_tsgen.writer import write_or_create_interface_file

DEFAULT_OUTPUT = Path("src/interfaces")
DEFAULT_FILE_NAME = "mongoose.gen.ts"
AUGMENTED_FILE_NAME = "index.d.ts"


def resolve_output_path(output: Path, is_augmented: bool) -> Path:
    """Return the file to write: ``output`` itself if it is a .ts file, else a file inside it."""
    if output.suffix == ".ts":
        return output
    return output / (AUGMENTED_FILE_NAME if is_augmented else DEFAULT_FILE_NAME)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Generate TypeScript declarations from document schema modules"
    )
    parser.add_argument(
        "models",
        type=Path,
        help="Model module, or directory of model modules",
    )
    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=DEFAULT_OUTPUT,
        help=f"Output .ts file or directory (default: {DEFAULT_OUTPUT})",
    )
    parser.add_argument(
        "--augment",
        action="store_true",
        help='Wrap declarations in a `declare module "mongoose"` block',
    )
    parser.add_argument(
        "-i", "--imports",
        action="append",
        default=[],
        metavar="LINE",
        help="Extra import line to add to the generated file (repeatable)",
    )
    parser.add_argument(
        "-t", "--types",
        type=Path,
        default=None,
        help="JSON file of inferred function signatures and virtual types",
    )
    parser.add_argument(
        "-d", "--dry-run",
        action="store_true",
        help="Print the generated declarations instead of writing them",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log each loaded model",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")

    try:
        function_types = load_function_types(args.types) if args.types else None
        schemas = load_schemas(find_model_paths(args.models))
        output = generate_file_string(
            schemas,
            is_augmented=args.augment,
            imports=args.imports,
            function_types=function_types,
        )
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.dry_run:
        print(output, end="")
        return 0

    out_path = resolve_output_path(args.output, args.augment)
    try:
        write_or_create_interface_file(output, out_path)
    except OSError as e:
        print(f"Error writing to {out_path}: {e}", file=sys.stderr)
        return 1
    print(f"Wrote {out_path}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
