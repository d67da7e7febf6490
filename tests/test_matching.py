"""Tests for allele matching."""

from vcfbeacon.matching import bases_match, count_carriers, genotype_has_allele, record_matches
from vcfbeacon.models import VariantRecord


def _record(ref="T", alts=("C",), genotypes=()):
    return VariantRecord("1", 100, ref, frozenset(alts), tuple(genotypes))


def test_bases_match_is_exact():
    assert bases_match("ACGT", "ACGT")
    assert not bases_match("acgt", "ACGT")
    assert not bases_match("A", "AA")
    assert not bases_match("A ", "A")


def test_record_matches_requires_ref_and_one_alt():
    record = _record(ref="A", alts=("G", "T"))
    assert record_matches(record, "A", "G")
    assert record_matches(record, "A", "T")
    assert not record_matches(record, "A", "C")
    assert not record_matches(record, "C", "G")


def test_genotype_has_allele_splits_on_both_separators():
    assert genotype_has_allele("T|C", "C")
    assert genotype_has_allele("T/C", "T")
    assert genotype_has_allele("C", "C")
    assert not genotype_has_allele("T|T", "C")
    assert not genotype_has_allele("./.", "C")
    # Tokens must match entirely
    assert not genotype_has_allele("CA|T", "C")


def test_count_carriers():
    record = _record(genotypes=["T|C", "T|T", "C/C", "./."])
    assert count_carriers(record, "C") == 2
    assert count_carriers(record, "T") == 2
    assert count_carriers(_record(), "C") == 0
