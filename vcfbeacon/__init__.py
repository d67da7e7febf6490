"""VCF Beacon package.

vcfbeacon answers allele existence queries ("is variant V present in dataset D?")
against one or more bgzipped, tabix-indexed VCF files. Each VCF file is served
as a single beacon dataset, and the per-dataset answers are aggregated into one
beacon allele response.
"""

__version__ = "0.1.0"

# Package-wide constants
INDEX_SUFFIX = ".tbi"
BEACON_API_VERSION = "0.3"
