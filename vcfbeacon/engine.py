"""Beacon query engine: validation, fan-out over datasets and aggregation."""

import dataclasses
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence

from vcfbeacon.catalog import DatasetCatalog
from vcfbeacon.errors import DATASET_NOT_FOUND, NO_DATASETS_ERROR, VALIDATION_ERROR
from vcfbeacon.models import (
    AlleleRequest,
    AlleleResponse,
    BeaconError,
    DatasetAlleleResponse,
    IncludeDatasetResponses,
)
from vcfbeacon.search import search_dataset

logger = logging.getLogger("vcfbeacon.engine")


def validate(request: AlleleRequest) -> Optional[BeaconError]:
    """Check the mandatory request fields in order; return the first failure."""
    message = None
    if _missing(request.reference_name):
        message = "Reference name cannot be null"
    elif request.start is None or request.start < 0:
        message = "Start cannot be null or less than 0"
    elif _missing(request.reference_bases):
        message = "Reference bases cannot be null"
    elif _missing(request.alternate_bases):
        message = "Alternate bases cannot be null"
    elif _missing(request.assembly_id):
        message = "Assembly Id cannot be null"
    elif not request.dataset_ids:
        message = "DatasetIds cannot be null and must include at least 1 id"

    if message is None:
        return None
    return BeaconError(VALIDATION_ERROR, message)


def _missing(value: Optional[str]) -> bool:
    return value is None or value == ""


def filter_dataset_responses(
    responses: Sequence[DatasetAlleleResponse],
    include: IncludeDatasetResponses,
) -> Optional[tuple]:
    """Apply the includeDatasetResponses policy.

    Errored responses have ``exists`` unset and are neither hits nor misses.
    """
    if include == IncludeDatasetResponses.ALL:
        return tuple(responses)
    if include == IncludeDatasetResponses.HIT:
        return tuple(r for r in responses if r.exists is True)
    if include == IncludeDatasetResponses.MISS:
        return tuple(r for r in responses if r.exists is False)
    return None


class QueryEngine:
    """Answers allele requests against a ``DatasetCatalog``.

    Per-dataset searches are independent. With ``max_workers`` > 1 they run in
    a thread pool; results are always aggregated in request order.
    """

    def __init__(self, catalog: DatasetCatalog, max_workers: int = 1):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.catalog = catalog
        self.max_workers = max_workers

    @property
    def beacon_id(self) -> str:
        return self.catalog.beacon_id

    def validate(self, request: AlleleRequest) -> Optional[BeaconError]:
        return validate(request)

    def query(
        self,
        reference_name: Optional[str],
        start: Optional[int],
        reference_bases: Optional[str],
        alternate_bases: Optional[str],
        assembly_id: Optional[str],
        dataset_ids: Optional[Iterable[str]],
        include_dataset_responses=None,
    ) -> AlleleResponse:
        """Field-wise entry point: validate first, then search.

        Unlike ``search``, an empty ``dataset_ids`` fails validation here (400).
        """
        request = AlleleRequest(
            reference_name=reference_name,
            start=start,
            reference_bases=reference_bases,
            alternate_bases=alternate_bases,
            assembly_id=assembly_id,
            dataset_ids=tuple(dataset_ids) if dataset_ids is not None else None,
            include_dataset_responses=include_dataset_responses,
        )
        error = validate(request)
        if error is not None:
            return self._error_response(_normalized(request), error)
        return self.search(request)

    def search(self, request: AlleleRequest) -> AlleleResponse:
        request = _normalized(request)

        if request.dataset_ids is not None and len(request.dataset_ids) == 0:
            return self._error_response(
                request,
                BeaconError(NO_DATASETS_ERROR, "No datasets defined. At least one dataset must be defined"),
            )

        error = validate(request)
        if error is not None:
            return self._error_response(request, error)

        responses = self._search_datasets(request)

        if len(responses) == 1 and responses[0].error is not None:
            # A single dataset's error becomes the answer
            exists = None
            error = responses[0].error
        else:
            exists = any(r.exists is True for r in responses)
            error = None

        return AlleleResponse(
            beacon_id=self.beacon_id,
            allele_request=request,
            exists=exists,
            error=error,
            dataset_allele_responses=filter_dataset_responses(
                responses, request.include_dataset_responses
            ),
        )

    def _search_datasets(self, request: AlleleRequest) -> List[DatasetAlleleResponse]:
        dataset_ids = request.dataset_ids
        if self.max_workers > 1 and len(dataset_ids) > 1:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, len(dataset_ids))) as pool:
                return list(pool.map(lambda d: self._search_dataset(d, request), dataset_ids))
        return [self._search_dataset(d, request) for d in dataset_ids]

    def _search_dataset(self, dataset_id: str, request: AlleleRequest) -> DatasetAlleleResponse:
        entry = self.catalog.get(dataset_id)
        if entry is None:
            logger.info(f"Requested dataset not found: {dataset_id}")
            return DatasetAlleleResponse(
                dataset_id=dataset_id,
                error=BeaconError(DATASET_NOT_FOUND, f"Could not find dataset with id: {dataset_id}"),
            )
        return search_dataset(entry.metadata, entry.reader, request)

    def _error_response(self, request: AlleleRequest, error: BeaconError) -> AlleleResponse:
        logger.info(f"Rejected request ({error.code}): {error.message}")
        return AlleleResponse(beacon_id=self.beacon_id, allele_request=request, error=error)


def _normalized(request: AlleleRequest) -> AlleleRequest:
    if request.include_dataset_responses is None:
        return dataclasses.replace(request, include_dataset_responses=IncludeDatasetResponses.NONE)
    return request
