"""VCF Beacon.

Serves bgzipped, tabix-indexed VCF files as beacon datasets and answers
allele existence queries against them from the command line.

Key features:
- One VCF file per dataset, paired with the datasets of a beacon definition
- Requires pre-indexed input files (TBI index next to the VCF)
- Genotype-aware matching, with sample counts and allele frequency
- Aggregation across datasets with ALL/HIT/MISS/NONE dataset responses
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from vcfbeacon import __version__
from vcfbeacon.config import load_catalog
from vcfbeacon.engine import QueryEngine
from vcfbeacon.errors import ConfigurationError
from vcfbeacon.models import AlleleRequest, IncludeDatasetResponses
from vcfbeacon.utils.logging import log_command, setup_logging


def _print_json(data: dict, indent: Optional[int] = 2) -> None:
    print(json.dumps(data, indent=indent))


def _request_from_args(args: argparse.Namespace, catalog_ids) -> AlleleRequest:
    dataset_ids = args.dataset_ids if args.dataset_ids is not None else list(catalog_ids)
    return AlleleRequest(
        reference_name=args.reference_name,
        start=args.start,
        reference_bases=args.reference_bases,
        alternate_bases=args.alternate_bases,
        assembly_id=args.assembly_id,
        dataset_ids=dataset_ids,
        include_dataset_responses=args.include_dataset_responses,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the vcfbeacon command-line interface.

    Parses command-line arguments and executes the appropriate command.
    Returns 1 when a query response carries a top-level error.
    """
    parser = argparse.ArgumentParser(
        description="Answer beacon allele queries against indexed VCF files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=__version__,
        help="Show version and exit",
    )

    # Create parent parser for shared arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be used multiple times, e.g. -vv)",
    )
    parent_parser.add_argument(
        "-y",
        "--yaml",
        dest="config",
        required=True,
        help="Path to a beacon config YAML/JSON listing the beacon definition and its VCF files",
    )
    parent_parser.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="(optional) Also write log messages to this file",
    )

    subparsers = parser.add_subparsers(
        dest="command", required=True, title="Available commands", metavar="command"
    )

    subparsers.add_parser(
        "info",
        help="Show the beacon definition and its datasets",
        parents=[parent_parser],
    )

    query_parser = subparsers.add_parser(
        "query",
        help="Query the beacon for an allele",
        parents=[parent_parser],
        description=(
            "Query one or more datasets for an allele. Without --datasetIds all datasets "
            "of the beacon are searched. With --samples the sample allele requests of "
            "the beacon definition are run instead."
        ),
    )
    query_parser.add_argument("--referenceName", dest="reference_name", help="Contig name, e.g. 1 or chr1")
    query_parser.add_argument("--start", dest="start", type=int, help="Position of the variant")
    query_parser.add_argument("--referenceBases", dest="reference_bases", help="Reference allele bases")
    query_parser.add_argument("--alternateBases", dest="alternate_bases", help="Alternate allele bases")
    query_parser.add_argument("--assemblyId", dest="assembly_id", help="Genome assembly, e.g. grch37")
    query_parser.add_argument(
        "--datasetIds", dest="dataset_ids", nargs="+", default=None, help="Datasets to search"
    )
    query_parser.add_argument(
        "--includeDatasetResponses",
        dest="include_dataset_responses",
        type=str.upper,
        choices=[m.value for m in IncludeDatasetResponses],
        default=None,
        help="Which per-dataset responses to include (default: NONE)",
    )
    query_parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="(optional) Number of threads used to search datasets in parallel",
    )
    query_parser.add_argument(
        "--samples",
        action="store_true",
        default=False,
        help="Run the sample allele requests of the beacon definition",
    )

    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    logger = setup_logging(verbosity=args.verbose, log_file=log_file)
    log_command(logger)

    try:
        catalog = load_catalog(args.config)
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(f"Error: {e}")

    if args.command == "info":
        _print_json(catalog.beacon.to_dict())
        return 0

    if args.workers < 1:
        parser.error("--workers must be at least 1")
    engine = QueryEngine(catalog, max_workers=args.workers)

    if args.samples:
        status = 0
        for request in catalog.beacon.sample_allele_requests:
            response = engine.search(request)
            _print_json(response.to_dict(), indent=None)
            if response.error is not None:
                status = 1
        return status

    response = engine.search(_request_from_args(args, catalog.dataset_ids))
    _print_json(response.to_dict())
    return 1 if response.error is not None else 0


if __name__ == "__main__":
    sys.exit(main())
