"""Shared pytest fixtures for vcfbeacon tests."""

from pathlib import Path

import pysam
import pytest
import yaml

from vcfbeacon.catalog import DatasetCatalog
from vcfbeacon.engine import QueryEngine
from vcfbeacon.models import AlleleRequest, BeaconInfo, DatasetMetadata

ASSEMBLY = "grch37"

HEADER_LINES = [
    "##fileformat=VCFv4.2",
    "##contig=<ID=1,length=10000>",
    "##contig=<ID=2,length=10000>",
]
GT_FORMAT_LINE = '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">'

# One sample. Position 200 is present but not carried by the sample, 300 is
# multi-allelic and 400 holds two records.
GT_RECORDS = [
    ("1", 100, "T", "C", ["0|1"]),
    ("1", 200, "G", "A", ["0|0"]),
    ("1", 300, "A", "G,T", ["1/2"]),
    ("1", 400, "C", "G", ["1|1"]),
    ("1", 400, "C", "T", ["0|1"]),
]

# No samples. Position 600 is listed twice.
NO_GT_RECORDS = [
    ("1", 100, "T", "C", None),
    ("1", 500, "G", "GA", None),
    ("1", 600, "A", "C", None),
    ("1", 600, "A", "C", None),
    ("2", 50, "C", "A", None),
]

TWO_SAMPLE_RECORDS = [
    ("1", 100, "T", "C", ["0|1", "0|0"]),
    ("1", 700, "G", "T", ["1/1", "0/1"]),
]


def write_indexed_vcf(path: Path, records, samples=()) -> Path:
    """Write a VCF, then bgzip and tabix it. Returns the path of the .vcf.gz."""
    lines = list(HEADER_LINES)
    columns = ["#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO"]
    if samples:
        lines.append(GT_FORMAT_LINE)
        columns += ["FORMAT", *samples]
    lines.append("\t".join(columns))

    for chrom, pos, ref, alt, genotypes in records:
        fields = [chrom, str(pos), ".", ref, alt, ".", ".", "."]
        if samples:
            fields += ["GT", *genotypes]
        lines.append("\t".join(fields))

    path.write_text("\n".join(lines) + "\n")
    return Path(pysam.tabix_index(str(path), preset="vcf", force=True))


@pytest.fixture(scope="session")
def vcf_dir(tmp_path_factory):
    return tmp_path_factory.mktemp("vcf")


@pytest.fixture(scope="session")
def gt_vcf(vcf_dir):
    return write_indexed_vcf(vcf_dir / "test.vcf", GT_RECORDS, samples=["S1"])


@pytest.fixture(scope="session")
def no_gt_vcf(vcf_dir):
    return write_indexed_vcf(vcf_dir / "test_no_genotype.vcf", NO_GT_RECORDS)


@pytest.fixture(scope="session")
def two_sample_vcf(vcf_dir):
    return write_indexed_vcf(vcf_dir / "test_two_samples.vcf", TWO_SAMPLE_RECORDS, samples=["S1", "S2"])


@pytest.fixture(scope="session")
def unindexed_vcf(vcf_dir):
    """A bgzipped VCF whose index has been removed."""
    path = write_indexed_vcf(vcf_dir / "test_no_index.vcf", GT_RECORDS, samples=["S1"])
    Path(str(path) + ".tbi").unlink()
    return path


@pytest.fixture(scope="session")
def beacon_info():
    return BeaconInfo(
        id="org.example.test-beacon",
        name="Test beacon",
        api_version="0.3",
        datasets=(
            DatasetMetadata("gt-dataset", ASSEMBLY, 1),
            DatasetMetadata("no-gt-dataset", ASSEMBLY, 0),
            DatasetMetadata("two-sample-dataset", ASSEMBLY, 2),
        ),
        sample_allele_requests=(
            AlleleRequest("1", 100, "T", "C", ASSEMBLY, ("gt-dataset",)),
            AlleleRequest("1", 100, "T", "C", ASSEMBLY, ("no-gt-dataset",), "ALL"),
        ),
    )


@pytest.fixture(scope="session")
def catalog(beacon_info, gt_vcf, no_gt_vcf, two_sample_vcf):
    return DatasetCatalog.build(beacon_info, [gt_vcf, no_gt_vcf, two_sample_vcf])


@pytest.fixture
def engine(catalog):
    return QueryEngine(catalog)


@pytest.fixture
def beacon_config(tmp_path, beacon_info, gt_vcf, no_gt_vcf, two_sample_vcf):
    """A beacon config YAML pointing at the session VCFs."""
    config = {
        "beacon": beacon_info.to_dict(),
        "filenames": [str(gt_vcf), str(no_gt_vcf), str(two_sample_vcf)],
    }
    config_file = tmp_path / "beacon.yaml"
    config_file.write_text(yaml.safe_dump(config, sort_keys=False))
    return config_file


def make_request(**overrides) -> AlleleRequest:
    fields = dict(
        reference_name="1",
        start=100,
        reference_bases="T",
        alternate_bases="C",
        assembly_id=ASSEMBLY,
        dataset_ids=("gt-dataset",),
        include_dataset_responses="ALL",
    )
    fields.update(overrides)
    return AlleleRequest(**fields)
