"""Region-bounded access to a bgzipped, tabix-indexed VCF file."""

import logging
from pathlib import Path
from typing import Iterator, Optional, Tuple

import pysam

from vcfbeacon import INDEX_SUFFIX
from vcfbeacon.errors import IndexMissingError, VcfFileMissingError
from vcfbeacon.models import VariantRecord

logger = logging.getLogger("vcfbeacon.reader")


def genotype_string(sample) -> str:
    """Render a pysam sample call as literal bases, e.g. ``T|C`` or ``T/.``."""
    alleles = sample.alleles or ()
    separator = "|" if sample.phased else "/"
    return separator.join(a if a is not None else "." for a in alleles)


class VariantRegionReader:
    """Wraps one indexed VCF file and yields records overlapping a region.

    The header is read once when the reader is opened. Every ``query`` opens its
    own pysam handle, so queries from concurrent requests never share htslib
    state and an exhausted query is restarted by simply querying again.
    """

    def __init__(self, vcf_path: Path | str, index_path: Optional[Path | str] = None):
        self.vcf_path = Path(vcf_path).expanduser()
        self.index_path = (
            Path(index_path).expanduser()
            if index_path is not None
            else Path(str(self.vcf_path) + INDEX_SUFFIX)
        )

        if not self.index_path.exists():
            logger.error(f"Index not found for {self.vcf_path}: {self.index_path}")
            raise IndexMissingError(
                f"VCF file requires an index file, but it does not exist: {self.index_path}"
            )
        if not self.vcf_path.exists():
            logger.error(f"VCF file not found: {self.vcf_path}")
            raise VcfFileMissingError(f"VCF file not found: {self.vcf_path}")

        with self._open() as vcf:
            self._samples: Tuple[str, ...] = tuple(vcf.header.samples)
        logger.debug(
            f"Opened {self.vcf_path} with {len(self._samples)} genotyped samples"
        )

    @classmethod
    def open(cls, vcf_path: Path | str, index_path: Optional[Path | str] = None) -> "VariantRegionReader":
        return cls(vcf_path, index_path)

    def _open(self) -> pysam.VariantFile:
        return pysam.VariantFile(str(self.vcf_path), index_filename=str(self.index_path))

    def has_genotypes(self) -> bool:
        return len(self._samples) > 0

    def genotyped_sample_count(self) -> int:
        return len(self._samples)

    def query(self, contig: str, start: int, end: int) -> Iterator[VariantRecord]:
        """Yield records overlapping the 1-based, closed interval [start, end].

        Records come back in the order they are stored in the index. A contig
        that is absent from the index yields nothing.
        """
        # pysam regions are 0-based and half-open
        fetch_start = max(start - 1, 0)
        with self._open() as vcf:
            try:
                records = vcf.fetch(contig, fetch_start, end)
            except ValueError as e:
                logger.debug(f"No records for {contig}:{start}-{end} in {self.vcf_path}: {e}")
                return
            for record in records:
                yield self._to_record(record)

    def _to_record(self, record) -> VariantRecord:
        genotypes: Tuple[str, ...] = ()
        if self._samples:
            genotypes = tuple(genotype_string(s) for s in record.samples.values())
        return VariantRecord(
            contig=record.chrom,
            position=record.pos,
            reference_allele=record.ref,
            alternate_alleles=frozenset(record.alts or ()),
            genotypes=genotypes,
        )

    def __repr__(self) -> str:
        return f"VariantRegionReader({str(self.vcf_path)!r})"
