"""schema-tsgen - TypeScript declarations generated from document schemas."""

from schema_tsgen.assembler import generate_file_string
from schema_tsgen.compiler import SchemaCompiler
from schema_tsgen.functions import format_functions
from schema_tsgen.loader import find_model_paths, load_function_types, load_schemas
from schema_tsgen.naming import make_line, subdoc_name
from schema_tsgen.schema import ChildSchema, Mixed, Model, ObjectId, Schema, VirtualType, model
from schema_tsgen.types import FieldSpec, PrimitiveType, SubdocumentMarker, classify_field
from schema_tsgen.writer import write_or_create_interface_file

__all__ = [
    # Main API
    "generate_file_string",
    "SchemaCompiler",
    # Schema model
    "Schema",
    "ChildSchema",
    "Model",
    "model",
    "VirtualType",
    "ObjectId",
    "Mixed",
    # Field classification
    "FieldSpec",
    "PrimitiveType",
    "SubdocumentMarker",
    "classify_field",
    # Formatting
    "format_functions",
    "make_line",
    "subdoc_name",
    # Loading and writing
    "find_model_paths",
    "load_schemas",
    "load_function_types",
    "write_or_create_interface_file",
]

__version__ = "0.1.0"
