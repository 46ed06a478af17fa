"""Loaders for hierarchy definitions and measurement lists.

Hierarchy documents are YAML or JSON (JSON parses as YAML), with camelCase
or snake_case keys. YAML anchors may be used for subtrees shared between
parents.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
import yaml
from pydantic import TypeAdapter, ValidationError

from healthscore.core.config import DEFAULT_HIERARCHY_PATH
from healthscore.core.exceptions import HierarchyLoadError, UnsupportedSchemaVersionError
from healthscore.domain.models.hierarchy import SCHEMA_VERSIONS, KpiHierarchy
from healthscore.domain.models.measurement import RawMeasurement

log = structlog.get_logger(__name__)

_measurements_adapter = TypeAdapter(List[RawMeasurement])

# Module-level cache keyed by resolved path (hierarchy files don't change at runtime)
_hierarchy_cache: Dict[str, KpiHierarchy] = {}


def hierarchy_from_dict(data: Any) -> KpiHierarchy:
    """Build a hierarchy from an already parsed document.

    Args:
        data: Mapping with "root" and optionally "schemaVersion"

    Returns:
        Validated KpiHierarchy

    Raises:
        UnsupportedSchemaVersionError: Declared schema version not supported
        HierarchyLoadError: Document does not describe a hierarchy
    """
    if not isinstance(data, dict):
        raise HierarchyLoadError(
            f"Hierarchy document must be a mapping, got {type(data).__name__}"
        )

    version = data.get("schemaVersion", data.get("schema_version"))
    if version is not None and version not in SCHEMA_VERSIONS:
        raise UnsupportedSchemaVersionError(
            f"Unsupported schema version {version!r}, "
            f"expected one of {list(SCHEMA_VERSIONS)}"
        )

    try:
        return KpiHierarchy.model_validate(data)
    except ValidationError as e:
        raise HierarchyLoadError(f"Invalid hierarchy document: {e}") from e
    except RecursionError as e:
        raise HierarchyLoadError("Hierarchy document is cyclic") from e


def load_hierarchy(path: Path) -> KpiHierarchy:
    """Load a hierarchy definition from a YAML or JSON file.

    Raises:
        UnsupportedSchemaVersionError: Declared schema version not supported
        HierarchyLoadError: File missing, unparsable or not a hierarchy
    """
    path = Path(path)
    data = _read_document(path)
    hierarchy = hierarchy_from_dict(data)
    log.info(
        "hierarchy_loaded",
        path=str(path),
        root_type_id=hierarchy.root.type_id,
        schema_version=hierarchy.schema_version,
    )
    return hierarchy


def default_hierarchy() -> KpiHierarchy:
    """The packaged default hierarchy. Cached after first load."""
    return _cached_hierarchy(DEFAULT_HIERARCHY_PATH)


def resolve_hierarchy(path: Optional[Path] = None) -> KpiHierarchy:
    """The hierarchy at path, or the default hierarchy when path is None.

    Each file is read once per process; later calls for the same path return
    the cached hierarchy.
    """
    if path is None:
        return default_hierarchy()
    return _cached_hierarchy(Path(path))


def _cached_hierarchy(path: Path) -> KpiHierarchy:
    key = str(path.resolve())
    if key not in _hierarchy_cache:
        _hierarchy_cache[key] = load_hierarchy(path)
    return _hierarchy_cache[key]


def measurements_from_list(data: Any) -> List[RawMeasurement]:
    """Validate a parsed list of measurements.

    Raises:
        HierarchyLoadError: Data is not a list of measurements
    """
    if not isinstance(data, list):
        raise HierarchyLoadError(
            f"Measurements document must be a list, got {type(data).__name__}"
        )
    try:
        return _measurements_adapter.validate_python(data)
    except ValidationError as e:
        raise HierarchyLoadError(f"Invalid measurements document: {e}") from e


def load_measurements(path: Path) -> List[RawMeasurement]:
    """Load raw measurements from a JSON (or YAML) file.

    Raises:
        HierarchyLoadError: File missing, unparsable or not a measurement list
    """
    path = Path(path)
    measurements = measurements_from_list(_read_document(path))
    log.info("measurements_loaded", path=str(path), count=len(measurements))
    return measurements


def _read_document(path: Path) -> Any:
    if not path.exists():
        raise HierarchyLoadError(f"File not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise HierarchyLoadError(f"Could not parse {path}: {e}") from e
