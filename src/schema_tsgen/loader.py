"""Load schemas from model modules and signature tables from JSON."""

from __future__ import annotations

import importlib.util
import json
import logging
import sys
from collections.abc import Iterable
from pathlib import Path
from types import ModuleType
from typing import Any

from schema_tsgen.functions import FunctionTypes
from schema_tsgen.schema import Schema

logger = logging.getLogger(__name__)


def find_model_paths(target: Path | str) -> list[Path]:
    """Find model modules at ``target``.

    A ``.py`` file is used as is. For a directory, every module directly in
    it is used, except private ones (``_*.py``, including ``__init__.py``).
    """
    target = Path(target)
    if target.is_file():
        return [target]
    if target.is_dir():
        paths = sorted(p for p in target.glob("*.py") if not p.name.startswith("_"))
        if paths:
            return paths
    raise FileNotFoundError(f"No model modules found at path {target}")


def load_schemas(model_paths: Iterable[Path | str]) -> dict[str, Schema]:
    """Import model modules and collect their schemas, keyed by model name.

    For each module the model is looked up in this order: a ``default``
    attribute, the module itself, the capitalized file name (``User``), the
    lowercase singular name (``user``), the collection name (``users``), the
    capitalized collection name (``Users``), then any public attribute.
    """
    schemas: dict[str, Schema] = {}

    for model_path in model_paths:
        path = Path(model_path)
        module = _import_module(path)
        found = _find_model(module, path.stem)
        if found is None:
            raise ValueError(
                f"A module was found at {path}, but no exported models were found. "
                "Please ensure this file exports a model (preferably as `default`)."
            )
        schemas[found.model_name] = found.schema
        logger.debug("Loaded model %s from %s", found.model_name, path)

    return schemas


def load_function_types(path: Path | str) -> FunctionTypes:
    """Load a table of inferred function signatures and virtual types.

    The file holds a JSON object keyed by model name, then by category
    (``methods``, ``statics``, ``query``, ``virtuals``), then by member name.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Function types file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Function types file {path} must contain a JSON object")
    return data


def is_model(obj: Any) -> bool:
    """Check if an object looks like a model (has a model name and a schema)."""
    return bool(getattr(obj, "model_name", None)) and getattr(obj, "schema", None) is not None


def _import_module(path: Path) -> ModuleType:
    if not path.is_file():
        raise FileNotFoundError(f"Could not find a module at path {path}.")

    module_name = f"_schema_tsgen_models.{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot import a module from path {path}.")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        del sys.modules[module_name]
        raise
    return module


def _find_model(module: ModuleType, file_stem: str) -> Any:
    model_name = file_stem[:1].upper() + file_stem[1:]
    collection_name_uppercased = model_name + "s"

    model_name_lowercase = file_stem[:-1] if file_stem.endswith("s") else file_stem
    model_name_lowercase = model_name_lowercase.lower()
    collection_name = model_name_lowercase + "s"

    candidates = [
        getattr(module, "default", None),
        module,
        getattr(module, model_name, None),
        getattr(module, model_name_lowercase, None),
        getattr(module, collection_name, None),
        getattr(module, collection_name_uppercased, None),
    ]
    for candidate in candidates:
        if is_model(candidate):
            return candidate

    for name, value in vars(module).items():
        if not name.startswith("_") and is_model(value):
            return value
    return None
