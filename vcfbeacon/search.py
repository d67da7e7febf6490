"""Search of a single dataset for a single allele."""

import logging
from fractions import Fraction
from typing import Tuple

from vcfbeacon.database.reader import VariantRegionReader
from vcfbeacon.errors import ASSEMBLY_MISMATCH
from vcfbeacon.matching import count_carriers, record_matches
from vcfbeacon.models import (
    AlleleRequest,
    BeaconError,
    DatasetAlleleResponse,
    DatasetMetadata,
    KeyValuePair,
)

logger = logging.getLogger("vcfbeacon.search")

MULTIPLE_VARIANTS_WARNING = KeyValuePair("warn", "Multiple variants were found with the same query")


def query_region(request: AlleleRequest) -> Tuple[int, int]:
    """Return the closed interval [start, end] searched for ``request``.

    Both branches use the length of the alternate bases; the reference length
    never widens the window.
    """
    # TODO: confirm whether the reference length should widen the window for deletions
    alt_len = len(request.alternate_bases)
    offset = alt_len if alt_len > len(request.reference_bases) else alt_len
    return request.start, request.start + offset


def search_dataset(
    metadata: DatasetMetadata,
    reader: VariantRegionReader,
    request: AlleleRequest,
) -> DatasetAlleleResponse:
    """Search one dataset for the allele described by ``request``.

    Without genotype data a record listing the alternate allele is a hit. With
    genotype data at least one sample must also carry the alternate allele;
    carriers are counted and divided by the number of genotyped samples to get
    the frequency.
    """
    if request.assembly_id != metadata.assembly_id:
        logger.debug(
            f"Assembly mismatch for dataset '{metadata.id}': "
            f"{request.assembly_id} != {metadata.assembly_id}"
        )
        return DatasetAlleleResponse(
            dataset_id=metadata.id,
            error=BeaconError(ASSEMBLY_MISMATCH, "Invalid Assembly"),
        )

    ref = request.reference_bases
    alt = request.alternate_bases
    genotyped = reader.has_genotypes()
    start, end = query_region(request)

    exists = False
    variant_count = call_count = sample_count = 0
    records_seen = 0

    for record in reader.query(request.reference_name, start, end):
        records_seen += 1
        if not record_matches(record, ref, alt):
            continue
        if not genotyped:
            exists = True
            variant_count += 1
            call_count += 1
            continue
        carriers = count_carriers(record, alt)
        if carriers > 0:
            exists = True
            variant_count += 1
            call_count += 1
            sample_count += carriers

    frequency = None
    if exists and genotyped:
        frequency = Fraction(sample_count, reader.genotyped_sample_count())

    info = (MULTIPLE_VARIANTS_WARNING,) if records_seen > 1 else ()
    logger.debug(
        f"Dataset '{metadata.id}' {request.reference_name}:{start}-{end} "
        f"{ref}>{alt}: exists={exists}, records={records_seen}"
    )

    return DatasetAlleleResponse(
        dataset_id=metadata.id,
        exists=exists,
        variant_count=variant_count,
        call_count=call_count,
        sample_count=sample_count if genotyped else None,
        frequency=frequency,
        info=info,
    )
