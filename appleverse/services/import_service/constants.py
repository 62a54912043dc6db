"""Constants for the apple dataset import service."""

# Canonical field -> column aliases, tried in order. Exact label match first,
# then a loose match (case-folded, whitespace/underscores collapsed).
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "cultivar_name": (
        "CULTIVAR NAME",
        "CULTIVAR_NAME",
        "cultivar_name",
        "Cultivar Name",
        "CULTIVAR",
        "cultivar",
        "Cultivar",
        "LABEL NAME",
        "name",
        "Name",
    ),
    "accession_code": (
        "ACCESSION",
        "accession",
        "Accession",
        "HARROW ACCESSION",
        "ACCESSION NUMBER",
        "ACNO",
        "acno",
        "AC_NO",
        "AC Number",
    ),
    "accession_number": (
        "ACNO",
        "acno",
        "AC_NO",
        "accession_number_ part2",
        "CN NUMBER",
        "CN",
        "CN Text",
        "AC Number",
    ),
    "label_name": (
        "LABEL NAME",
        "LABEL_NAME",
        "label_name",
        "Label Name",
    ),
    "genus": (
        "E GENUS",
        "E_GENUS",
        "e_genus",
        "GENUS",
        "genus",
        "Genus",
        "E Genus",
    ),
    "species": (
        "E SPECIES",
        "E_SPECIES",
        "e_species",
        "SPECIES",
        "species",
        "Species",
    ),
    "country": (
        "E Origin Country",
        "E_ORIGIN_COUNTRY",
        "e_origin_country",
        "origin_country",
        "COUNTRY",
        "Country",
        "country",
        "Geography",
    ),
    "province": (
        "E Origin Province",
        "E_ORIGIN_PROVINCE",
        "e_origin_province",
        "origin_province",
        "PROVINCE/STATE",
        "province_state",
        "Province",
        "province",
        "STATE",
        "state",
    ),
    "city": (
        "E Origin City",
        "E_ORIGIN_CITY",
        "e_origin_city",
        "origin_city",
        "CITY",
        "City",
        "city",
    ),
    "pedigree_description": (
        "PEDIGREE DESCRIPTION",
        "Pedigree Description",
        "E pedigree",
        "E_PEDIGREE",
        "e_pedigree",
        "PEDIGREE",
        "pedigree",
        "Pedigree",
    ),
    "breeder": (
        "E Breeder",
        "E_BREEDER",
        "e_breeder",
        "BREEDER",
        "breeder",
        "BREEDER OR COLLECTOR",
        "breeder_or_collector",
    ),
    "collector": (
        "E Collector",
        "E_COLLECTOR",
        "e_collector",
        "COLLECTOR",
        "collector",
    ),
}

# Columns split into genus/species when those are not mapped directly
TAXON_ALIASES: tuple[str, ...] = ("TAXON", "Taxon", "taxon")

FIELD_DEFAULTS: dict[str, str] = {field: "" for field in FIELD_ALIASES}
FIELD_DEFAULTS["genus"] = "Malus"

# Workbook sheets read ahead of the rest, in this order
PRIORITY_SHEETS: tuple[str, ...] = ("Accession", "Pedigree", "Descriptors", "Accession Source")

# A column whose header contains this text marks re-embedded header rows
HEADER_SENTINEL = "SYNCHRONIZATION"

DATASET_EXTENSIONS = frozenset({".csv", ".json", ".xlsx", ".xls"})
IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".webp", ".gif"})
PRESENTATION_EXTENSIONS = frozenset({".ppt", ".pptx"})

# Known dataset file names, tried before the "*final*dataset*" search
DATASET_FILE_NAMES: tuple[str, ...] = (
    "FINAL_DATASET_APPLEVERSE.xlsx",
    "FINAL_DATASET_APPLEVERSE.xls",
    "FINAL_DATASET_APPLEVERSE.csv",
    "final dataset.xlsx",
    "final dataset.xls",
    "final dataset.csv",
    "final_dataset.xlsx",
    "final_dataset.xls",
    "final_dataset.csv",
)
DATASET_SEARCH_EXTENSIONS: tuple[str, ...] = (".xlsx", ".xls", ".csv")

DEFAULT_BATCH_SIZE = 50

# Errors printed in the CLI summary
MAX_REPORTED_ERRORS = 10
