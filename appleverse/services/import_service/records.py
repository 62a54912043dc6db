"""In-memory canonical apple record produced by the field normalizer."""

import re
from urllib.parse import unquote

from pydantic import BaseModel, Field

_EXTENSION_RE = re.compile(r"\.[^./\\]+$")
_WHITESPACE_RE = re.compile(r"\s+")


def normalized_image_key(path: str) -> str:
    """Return the dedup key for an image path or URL.

    The key is the case-folded basename with any query string, fragment,
    directory or URL prefix, extension and whitespace removed, so
    ``/images/Gala 1.JPG`` and ``/data/gala1.jpg?v=2`` share a key.

    Args:
        path: Serving path, file name or URL of the image.

    Returns:
        The normalized key (may be empty for an empty path).
    """
    name = re.split(r"[?#]", path, maxsplit=1)[0]
    name = re.split(r"[/\\]", name)[-1]
    name = unquote(name)
    name = _EXTENSION_RE.sub("", name)
    return _WHITESPACE_RE.sub("", name.casefold())


class NormalizedRecord(BaseModel):
    """A canonical apple record before it is persisted."""

    # Identity
    accession_code: str = ""
    cultivar_name: str = ""
    accession_number: str = ""
    label_name: str = ""

    # Taxonomy
    genus: str = "Malus"
    species: str = ""

    # Origin
    country: str = ""
    province: str = ""
    city: str = ""

    # Lineage
    pedigree_description: str = ""
    breeder: str = ""
    collector: str = ""

    images: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)

    # Provenance
    source_row_index: int | None = None
    source_sheet: str | None = None
    source_file: str | None = None

    @property
    def is_usable(self) -> bool:
        """Whether the record can be persisted (it has a cultivar name)."""
        return bool(self.cultivar_name)

    def has_image(self, path: str) -> bool:
        key = normalized_image_key(path)
        return any(normalized_image_key(existing) == key for existing in self.images)

    def add_image(self, path: str) -> bool:
        """Append an image path unless one with the same key is already attached.

        Returns:
            True if the image was added.
        """
        if self.has_image(path):
            return False
        self.images.append(path)
        return True
