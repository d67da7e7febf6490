"""Loading of the beacon definition and its VCF files.

A beacon config is a YAML (or JSON) document with two parts: the beacon
definition and the list of VCF files, one per dataset, in dataset order::

    beacon:
      id: com.example.beacon
      datasets:
        - id: gt-dataset
          assemblyId: grch37
    filenames:
      - data/test.vcf.gz

Instead of ``beacon`` the definition can be given as ``beaconJsonFile`` (a path
to a JSON/YAML file) or ``beaconJson`` (an inline string). ``filenames`` may be
a list or a comma separated string. Relative paths are resolved against the
directory of the config file.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from vcfbeacon.catalog import DatasetCatalog
from vcfbeacon.errors import ConfigurationError
from vcfbeacon.models import BeaconInfo

logger = logging.getLogger("vcfbeacon.config")


def _expand(path: str, base_dir: Optional[Path]) -> Path:
    expanded = Path(os.path.expandvars(path)).expanduser()
    if not expanded.is_absolute() and base_dir is not None:
        expanded = base_dir / expanded
    return expanded


def _parse_document(text: str, source: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse {source}: {e}") from e


def read_filenames(value: Any, base_dir: Optional[Path] = None) -> List[Path]:
    if value is None:
        raise ConfigurationError(
            "Missing required parameter: filenames. Please supply a list of VCF files to load"
        )
    if isinstance(value, str):
        names = [n.strip() for n in value.split(",") if n.strip()]
    else:
        names = [str(n) for n in value]
    if not names:
        raise ConfigurationError("No file names specified")
    return [_expand(n, base_dir) for n in names]


def read_beacon(params: Dict[str, Any], base_dir: Optional[Path] = None) -> BeaconInfo:
    """Build the beacon definition from whichever key the config uses."""
    if params.get("beacon") is not None:
        data = params["beacon"]
    elif params.get("beaconJsonFile"):
        beacon_file = _expand(str(params["beaconJsonFile"]), base_dir)
        if not beacon_file.exists():
            raise ConfigurationError(f"Beacon definition file does not exist: {beacon_file}")
        data = _parse_document(beacon_file.read_text(), str(beacon_file))
    elif params.get("beaconJson"):
        data = _parse_document(params["beaconJson"], "beaconJson")
    else:
        raise ConfigurationError(
            "Missing required parameter: beacon. Provide 'beacon', 'beaconJsonFile' or 'beaconJson'"
        )

    if not isinstance(data, dict):
        raise ConfigurationError("Beacon definition must be a mapping")
    try:
        return BeaconInfo.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid beacon definition: {e}") from e


def load_catalog_params(params: Dict[str, Any], base_dir: Optional[Path] = None) -> DatasetCatalog:
    beacon = read_beacon(params, base_dir)
    filenames = read_filenames(params.get("filenames"), base_dir)
    return DatasetCatalog.build(beacon, filenames)


def load_catalog(config_file: Path | str) -> DatasetCatalog:
    """Read a beacon config file and open all of its datasets."""
    config_path = Path(config_file).expanduser().resolve()
    if not config_path.exists():
        raise ConfigurationError(f"Beacon config not found: {config_path}")
    logger.info(f"Loading beacon config from {config_path}")

    params = _parse_document(config_path.read_text(), str(config_path))
    if not isinstance(params, dict):
        raise ConfigurationError(f"Beacon config must be a mapping: {config_path}")
    return load_catalog_params(params, base_dir=config_path.parent)
