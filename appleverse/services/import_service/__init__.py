"""Import service package for reading apple datasets and replacing the catalogue."""

from .constants import (
    DATASET_FILE_NAMES,
    FIELD_ALIASES,
    FIELD_DEFAULTS,
    PRIORITY_SHEETS,
    TAXON_ALIASES,
)
from .errors import (
    DatasetImportError,
    DatasetNotFoundError,
    DatasetReadError,
    NoUsableRowsError,
    UnsupportedFileTypeError,
)
from .image_matcher import (
    ImageFile,
    MatchSummary,
    find_images_for_accession,
    find_images_for_accessions,
    match_image,
    match_images,
    scan_image_directories,
    scan_image_directory,
)
from .image_linker import LinkReport, link_active_images
from .importer import (
    BulkImporter,
    ImportReport,
    ImportRowError,
    LocalPreview,
    collect_local_data,
    run_bulk_import,
)
from .normalizer import FieldNormalizer
from .parsers import RawRow, parse_csv, parse_json, parse_xls, parse_xlsx
from .reader import find_dataset_file, read_dataset_file, read_directory
from .records import NormalizedRecord, normalized_image_key

__all__ = [
    # Constants
    "DATASET_FILE_NAMES",
    "FIELD_ALIASES",
    "FIELD_DEFAULTS",
    "PRIORITY_SHEETS",
    "TAXON_ALIASES",
    # Errors
    "DatasetImportError",
    "DatasetNotFoundError",
    "DatasetReadError",
    "NoUsableRowsError",
    "UnsupportedFileTypeError",
    # Reader
    "RawRow",
    "parse_csv",
    "parse_json",
    "parse_xls",
    "parse_xlsx",
    "find_dataset_file",
    "read_dataset_file",
    "read_directory",
    # Normalizer
    "FieldNormalizer",
    "NormalizedRecord",
    "normalized_image_key",
    # Image matcher
    "ImageFile",
    "MatchSummary",
    "find_images_for_accession",
    "find_images_for_accessions",
    "match_image",
    "match_images",
    "scan_image_directories",
    "scan_image_directory",
    # Image linker
    "LinkReport",
    "link_active_images",
    # Importer
    "BulkImporter",
    "ImportReport",
    "ImportRowError",
    "LocalPreview",
    "collect_local_data",
    "run_bulk_import",
]
