"""Map raw dataset rows onto canonical apple records."""

import re
from collections.abc import Mapping, Sequence

from .constants import FIELD_ALIASES, FIELD_DEFAULTS, TAXON_ALIASES
from .parsers import RawRow
from .records import NormalizedRecord


def loose_key(label: str) -> str:
    """Case-folded label with runs of whitespace/underscores collapsed to ``_``."""
    return re.sub(r"[\s_]+", "_", label.strip().casefold())


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


class FieldNormalizer:
    """Resolve canonical fields from heterogeneous column labels.

    For each field the aliases are tried in order. An alias matches a column
    exactly first, then loosely (see :func:`loose_key`). The first alias
    whose column holds a non-empty value wins and that column is consumed.
    Columns nothing consumed are kept in the record's metadata under their
    original label.
    """

    def __init__(
        self,
        aliases: Mapping[str, Sequence[str]] | None = None,
        taxon_aliases: Sequence[str] | None = None,
        defaults: Mapping[str, str] | None = None,
    ):
        self.aliases = dict(aliases if aliases is not None else FIELD_ALIASES)
        self.taxon_aliases = tuple(taxon_aliases if taxon_aliases is not None else TAXON_ALIASES)
        self.defaults = dict(defaults if defaults is not None else FIELD_DEFAULTS)

    @staticmethod
    def _lookup(
        alias: str,
        values: Mapping[str, str],
        loose_index: Mapping[str, list[str]],
    ) -> tuple[str, str] | None:
        """Return ``(column, value)`` for the first non-empty column matching alias."""
        if alias in values:
            value = _text(values[alias])
            if value:
                return alias, value
        for column in loose_index.get(loose_key(alias), ()):
            value = _text(values[column])
            if value:
                return column, value
        return None

    def normalize(
        self,
        row: Mapping[str, object],
        *,
        source_row_index: int | None = None,
        source_sheet: str | None = None,
        source_file: str | None = None,
    ) -> NormalizedRecord:
        """Normalize one row. Never raises; cultivar_name may come back empty."""
        values = {str(k): _text(v) for k, v in row.items()}
        loose_index: dict[str, list[str]] = {}
        for column in values:
            loose_index.setdefault(loose_key(column), []).append(column)

        consumed: set[str] = set()
        resolved: dict[str, str] = {}
        for field_name, aliases in self.aliases.items():
            for alias in aliases:
                found = self._lookup(alias, values, loose_index)
                if found is not None:
                    column, value = found
                    resolved[field_name] = value
                    consumed.add(column)
                    break

        if not resolved.get("genus") or not resolved.get("species"):
            for alias in self.taxon_aliases:
                found = self._lookup(alias, values, loose_index)
                if found is None:
                    continue
                column, taxon = found
                genus, *rest = taxon.split()
                species = " ".join(rest)
                used = False
                if not resolved.get("genus"):
                    resolved["genus"] = genus
                    used = True
                if not resolved.get("species") and species:
                    resolved["species"] = species
                    used = True
                if used:
                    consumed.add(column)
                break

        fields = {name: resolved.get(name) or self.defaults.get(name, "") for name in self.aliases}
        for name, default in self.defaults.items():
            fields.setdefault(name, default)

        metadata = {column: value for column, value in values.items() if column not in consumed}

        return NormalizedRecord(
            **fields,
            metadata=metadata,
            source_row_index=source_row_index,
            source_sheet=source_sheet,
            source_file=source_file,
        )

    def normalize_row(self, raw: RawRow) -> NormalizedRecord:
        return self.normalize(
            raw.values,
            source_row_index=raw.row_number,
            source_sheet=raw.sheet,
            source_file=raw.source_file,
        )

    def normalize_rows(self, rows: Sequence[RawRow]) -> list[NormalizedRecord]:
        return [self.normalize_row(raw) for raw in rows]
