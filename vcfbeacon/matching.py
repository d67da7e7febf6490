"""Allele matching rules.

Bases are compared literally: no case folding, trimming or left-alignment.
Genotypes are expected as allele strings (``T|C``), not allele indices.
"""

import re

from vcfbeacon.models import VariantRecord

GENOTYPE_SEPARATORS = re.compile(r"[|/]")


def bases_match(a: str, b: str) -> bool:
    return a == b


def record_matches(record: VariantRecord, ref: str, alt: str) -> bool:
    """True if the record has reference ``ref`` and ``alt`` among its alternates."""
    return bases_match(record.reference_allele, ref) and any(
        bases_match(a, alt) for a in record.alternate_alleles
    )


def genotype_has_allele(genotype: str, allele: str) -> bool:
    return any(bases_match(token, allele) for token in GENOTYPE_SEPARATORS.split(genotype))


def count_carriers(record: VariantRecord, allele: str) -> int:
    """Number of samples whose genotype carries ``allele``."""
    return sum(1 for gt in record.genotypes if genotype_has_allele(gt, allele))
