"""Immutable catalog of the datasets served by a beacon."""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from vcfbeacon.database.reader import VariantRegionReader
from vcfbeacon.errors import ConfigurationError
from vcfbeacon.models import BeaconInfo, DatasetMetadata

logger = logging.getLogger("vcfbeacon.catalog")


class CatalogEntry:
    """One dataset: its metadata and the reader for its VCF file."""

    __slots__ = ("metadata", "reader")

    def __init__(self, metadata: DatasetMetadata, reader: VariantRegionReader):
        self.metadata = metadata
        self.reader = reader

    def __repr__(self) -> str:
        return f"CatalogEntry({self.metadata.id!r}, {self.reader!r})"


class DatasetCatalog:
    """Maps dataset ids to their metadata and readers.

    The catalog is built once, before any query runs, and is never mutated
    afterwards; it can be shared by any number of concurrent queries. Building
    fails as a whole: a single missing file or index means no catalog at all.
    """

    def __init__(self, beacon: BeaconInfo, entries: Sequence[CatalogEntry]):
        by_id = {}
        for entry in entries:
            if entry.metadata.id in by_id:
                raise ConfigurationError(f"Duplicate dataset id: {entry.metadata.id}")
            by_id[entry.metadata.id] = entry
        self.beacon = beacon
        self._entries = MappingProxyType(by_id)

    @classmethod
    def build(
        cls,
        beacon: BeaconInfo,
        filenames: Sequence[Union[str, Path]],
    ) -> "DatasetCatalog":
        """Open one reader per dataset, pairing datasets and files by position.

        The first dataset of ``beacon`` is served from the first file, and so on.
        """
        if not beacon.datasets:
            raise ConfigurationError("A list of the included datasets is required in the beacon definition")
        if len(filenames) != len(beacon.datasets):
            raise ConfigurationError(
                f"Number of datasets ({len(beacon.datasets)}) and files ({len(filenames)}) "
                "does not match. Each file constitutes a single dataset"
            )

        entries: List[CatalogEntry] = []
        for metadata, filename in zip(beacon.datasets, filenames):
            logger.info(f"Loading dataset '{metadata.id}' from {filename}")
            entries.append(CatalogEntry(metadata, VariantRegionReader.open(filename)))
        return cls(beacon, entries)

    @classmethod
    def from_pairs(
        cls,
        pairs: Sequence[Tuple[DatasetMetadata, Union[str, Path]]],
        beacon_id: str = "vcfbeacon",
    ) -> "DatasetCatalog":
        """Build a catalog from (metadata, file path) pairs without a beacon definition."""
        beacon = BeaconInfo(id=beacon_id, datasets=tuple(m for m, _ in pairs))
        return cls.build(beacon, [path for _, path in pairs])

    @property
    def beacon_id(self) -> str:
        return self.beacon.id

    @property
    def dataset_ids(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def get(self, dataset_id: str) -> Optional[CatalogEntry]:
        return self._entries.get(dataset_id)

    def __contains__(self, dataset_id: object) -> bool:
        return dataset_id in self._entries

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
