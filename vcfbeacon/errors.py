"""Error codes and configuration exceptions for vcfbeacon.

Errors encountered while answering a query are never raised: they are returned
as ``BeaconError`` values inside the response so that callers can branch on
``errorCode``. Problems found while building a catalog are raised as
``ConfigurationError`` and stop the beacon from becoming queryable.
"""

VALIDATION_ERROR = 400
ASSEMBLY_MISMATCH = 400
DATASET_NOT_FOUND = 404
NO_DATASETS_ERROR = 500


class ConfigurationError(RuntimeError):
    """Raised when the beacon or its datasets cannot be set up."""


class IndexMissingError(ConfigurationError):
    """A VCF file has no companion tabix index."""


class VcfFileMissingError(ConfigurationError, FileNotFoundError):
    """The VCF file itself does not exist."""
