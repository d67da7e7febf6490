"""Beacon request/response models.

All models are frozen dataclasses built once per step. Field names are
snake_case in Python; ``to_dict``/``from_dict`` translate to the camelCase
names of the Beacon v0.3 wire format.
"""

from __future__ import annotations

import dataclasses
import enum
from fractions import Fraction
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple


class IncludeDatasetResponses(str, enum.Enum):
    ALL = "ALL"
    NONE = "NONE"
    HIT = "HIT"
    MISS = "MISS"

    @classmethod
    def parse(cls, value: Any) -> Optional["IncludeDatasetResponses"]:
        """Accept an enum member, its name in any case, or None.

        An empty string counts as absent.
        """
        if value is None or isinstance(value, cls):
            return value
        if isinstance(value, str) and not value.strip():
            return None
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(
                f"includeDatasetResponses must be one of "
                f"{', '.join(m.value for m in cls)}, got {value!r}"
            ) from None


@dataclasses.dataclass(frozen=True)
class BeaconError:
    code: int
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"errorCode": self.code, "errorMessage": self.message}


@dataclasses.dataclass(frozen=True)
class KeyValuePair:
    key: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {"key": self.key, "value": self.value}


@dataclasses.dataclass(frozen=True)
class AlleleRequest:
    reference_name: Optional[str] = None
    start: Optional[int] = None
    reference_bases: Optional[str] = None
    alternate_bases: Optional[str] = None
    assembly_id: Optional[str] = None
    dataset_ids: Optional[Tuple[str, ...]] = None
    include_dataset_responses: Optional[IncludeDatasetResponses] = None

    def __post_init__(self):
        # Lists coming from JSON/YAML are frozen into tuples, a lone id is wrapped
        if isinstance(self.dataset_ids, str):
            lone_id = self.dataset_ids.strip()
            object.__setattr__(self, "dataset_ids", (lone_id,) if lone_id else ())
        elif self.dataset_ids is not None and not isinstance(self.dataset_ids, tuple):
            object.__setattr__(self, "dataset_ids", tuple(self.dataset_ids))
        object.__setattr__(
            self,
            "include_dataset_responses",
            IncludeDatasetResponses.parse(self.include_dataset_responses),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AlleleRequest":
        start = data.get("start")
        return cls(
            reference_name=_optional_str(data.get("referenceName")),
            start=int(start) if start is not None else None,
            reference_bases=data.get("referenceBases"),
            alternate_bases=data.get("alternateBases"),
            assembly_id=data.get("assemblyId"),
            dataset_ids=data.get("datasetIds"),
            include_dataset_responses=data.get("includeDatasetResponses"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "referenceName": self.reference_name,
            "start": self.start,
            "referenceBases": self.reference_bases,
            "alternateBases": self.alternate_bases,
            "assemblyId": self.assembly_id,
            "datasetIds": list(self.dataset_ids) if self.dataset_ids is not None else None,
            "includeDatasetResponses": (
                self.include_dataset_responses.value
                if self.include_dataset_responses is not None
                else None
            ),
        })


@dataclasses.dataclass(frozen=True)
class DatasetMetadata:
    id: str
    assembly_id: str
    sample_count: int = 0
    name: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DatasetMetadata":
        if not data.get("id"):
            raise ValueError(f"Dataset definition without an id: {dict(data)}")
        if not data.get("assemblyId"):
            raise ValueError(f"Dataset '{data['id']}' has no assemblyId")
        sample_count = int(data.get("sampleCount") or 0)
        if sample_count < 0:
            raise ValueError(f"Dataset '{data['id']}' has a negative sampleCount")
        return cls(
            id=str(data["id"]),
            assembly_id=str(data["assemblyId"]),
            sample_count=sample_count,
            name=data.get("name"),
            description=data.get("description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "assemblyId": self.assembly_id,
            "sampleCount": self.sample_count,
        })


@dataclasses.dataclass(frozen=True)
class VariantRecord:
    contig: str
    position: int
    reference_allele: str
    alternate_alleles: FrozenSet[str]
    genotypes: Tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class DatasetAlleleResponse:
    dataset_id: str
    exists: Optional[bool] = None
    error: Optional[BeaconError] = None
    variant_count: Optional[int] = None
    call_count: Optional[int] = None
    sample_count: Optional[int] = None
    frequency: Optional[Fraction] = None
    info: Tuple[KeyValuePair, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "datasetId": self.dataset_id,
            "exists": self.exists,
            "error": self.error.to_dict() if self.error else None,
            "frequency": float(self.frequency) if self.frequency is not None else None,
            "variantCount": self.variant_count,
            "callCount": self.call_count,
            "sampleCount": self.sample_count,
            "info": [kv.to_dict() for kv in self.info] or None,
        })


@dataclasses.dataclass(frozen=True)
class AlleleResponse:
    beacon_id: Optional[str]
    allele_request: Optional[AlleleRequest]
    exists: Optional[bool] = None
    error: Optional[BeaconError] = None
    dataset_allele_responses: Optional[Tuple[DatasetAlleleResponse, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        responses = None
        if self.dataset_allele_responses is not None:
            responses = [r.to_dict() for r in self.dataset_allele_responses]
        return _drop_none({
            "beaconId": self.beacon_id,
            "exists": self.exists,
            "error": self.error.to_dict() if self.error else None,
            "alleleRequest": self.allele_request.to_dict() if self.allele_request else None,
            "datasetAlleleResponses": responses,
        })


@dataclasses.dataclass(frozen=True)
class BeaconInfo:
    """Descriptive metadata of the beacon served by a catalog."""

    id: str
    name: Optional[str] = None
    api_version: Optional[str] = None
    datasets: Tuple[DatasetMetadata, ...] = ()
    sample_allele_requests: Tuple[AlleleRequest, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BeaconInfo":
        if not data.get("id"):
            raise ValueError("Beacon definition requires an id")
        return cls(
            id=str(data["id"]),
            name=data.get("name"),
            api_version=_optional_str(data.get("apiVersion")),
            datasets=tuple(DatasetMetadata.from_dict(d) for d in data.get("datasets") or []),
            sample_allele_requests=tuple(
                AlleleRequest.from_dict(r) for r in data.get("sampleAlleleRequests") or []
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "name": self.name,
            "apiVersion": self.api_version,
            "datasets": [d.to_dict() for d in self.datasets],
            "sampleAlleleRequests": [r.to_dict() for r in self.sample_allele_requests] or None,
        })


def _optional_str(value: Any) -> Optional[str]:
    # YAML turns unquoted contig names like 1 or X into int/str
    return None if value is None else str(value)


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}
