"""Deterministic extraction of species fields from free-form model output.

The upstream models are asked for `Label: value` lines but do not always
comply. Extraction is a small ordered rule set over normalised text:

1. strip markdown (fences, headers, emphasis, bullets, numbering);
2. find line-anchored labels, trying each field's aliases in order;
3. split list-like values (classification ranks, threats) on delimiters.

Nothing is guessed. A field that is not found stays None, and a result
without a species name is marked low confidence.
"""

import re
from dataclasses import asdict, dataclass, field
from typing import Any

TAXONOMIC_RANKS = ("kingdom", "phylum", "class", "order", "family", "genus")

MAX_THREATS = 6

SPECIES_ALIASES = ("species name", "identified species", "species", "identification")
SCIENTIFIC_ALIASES = ("scientific name", "binomial name", "scientific")
COMMON_ALIASES = ("common name",)
CONFIDENCE_ALIASES = ("confidence", "confidence level", "probability", "certainty")
CLASSIFICATION_ALIASES = ("classification", "taxonomic classification", "taxonomy")
HABITAT_ALIASES = ("habitat",)
CONSERVATION_ALIASES = ("conservation status", "conservation")
THREAT_ALIASES = ("known threats", "threats", "primary threats")
DESCRIPTION_ALIASES = ("description", "summary")

ALL_LABELS = (
    SPECIES_ALIASES
    + SCIENTIFIC_ALIASES
    + COMMON_ALIASES
    + CONFIDENCE_ALIASES
    + CLASSIFICATION_ALIASES
    + HABITAT_ALIASES
    + CONSERVATION_ALIASES
    + THREAT_ALIASES
    + DESCRIPTION_ALIASES
    + TAXONOMIC_RANKS
)

# Placeholder answers that carry no information
EMPTY_VALUES = {"", "none", "n/a", "na", "unknown", "not known", "-", "not applicable"}

_LABEL_LINE = re.compile(r"^\s*([A-Za-z][A-Za-z ]{0,40}?)\s*[:\-–—]\s*(.*)$")


@dataclass
class SpeciesIdentification:
    """Structured view of a species identification answer."""

    species: str | None
    scientific_name: str | None
    common_name: str | None
    confidence: float | None
    classification: dict[str, str | None]
    habitat: str | None
    conservation_status: str | None
    threats: list[str] = field(default_factory=list)
    description: str | None = None
    # "parsed" when a species label was found, "low" otherwise
    confidence_level: str = "parsed"
    raw_text: str = ""

    @property
    def is_low_confidence(self) -> bool:
        return self.confidence_level == "low"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class SpeciesResponseParser:
    """Parse species identification text using deterministic rules."""

    @staticmethod
    def normalize(text: str) -> str:
        """Remove markdown decoration and list markers, keep line structure."""
        lines = []
        for line in text.replace("\r\n", "\n").split("\n"):
            if line.strip().startswith("```"):
                continue
            line = re.sub(r"^\s*#{1,6}\s*", "", line)
            line = re.sub(r"^\s*(?:[-•*+]|\d+[.)])\s+", "", line)
            line = line.replace("**", "").replace("__", "")
            line = re.sub(r"(?<!\w)[*_](\S[^*_]*?)[*_](?!\w)", r"\1", line)
            lines.append(line.rstrip())
        return "\n".join(lines).strip()

    @staticmethod
    def _label_of(line: str) -> tuple[str, str] | None:
        match = _LABEL_LINE.match(line)
        if not match:
            return None
        label = re.sub(r"\s+", " ", match.group(1).strip().lower())
        if label not in ALL_LABELS:
            return None
        return label, match.group(2).strip()

    @classmethod
    def extract_value(cls, text: str, aliases: tuple[str, ...]) -> str | None:
        """Find the value of the first alias that appears as a line label.

        A label with an empty value takes the next non-label line instead.
        """
        lines = text.split("\n")
        labelled = [cls._label_of(line) for line in lines]
        for alias in aliases:
            for i, found in enumerate(labelled):
                if not found or found[0] != alias:
                    continue
                value = found[1]
                if not value:
                    for follow, follow_label in zip(lines[i + 1 :], labelled[i + 1 :], strict=True):
                        if follow_label:
                            break
                        if follow.strip():
                            value = follow.strip()
                            break
                if value.strip().lower().rstrip(".") in EMPTY_VALUES:
                    return None
                return value
        return None

    @classmethod
    def extract_block(cls, text: str, aliases: tuple[str, ...]) -> list[str]:
        """Return the label's inline value plus following lines up to the next label."""
        lines = text.split("\n")
        for alias in aliases:
            for i, line in enumerate(lines):
                found = cls._label_of(line)
                if not found or found[0] != alias:
                    continue
                block = [found[1]] if found[1] else []
                for follow in lines[i + 1 :]:
                    if cls._label_of(follow):
                        break
                    if not follow.strip():
                        if block:
                            break
                        continue
                    block.append(follow.strip())
                return block
        return []

    @staticmethod
    def parse_confidence(value: str | None) -> float | None:
        """Read a 0-100 confidence; fractions like 0.85 are scaled up."""
        if not value:
            return None
        match = re.search(r"(\d{1,3}(?:\.\d+)?)", value)
        if not match:
            return None
        number = float(match.group(1))
        if number <= 1 and "%" not in value and "." in match.group(1):
            number *= 100
        if number > 100:
            return None
        return round(number, 2)

    @classmethod
    def parse_classification(cls, text: str) -> dict[str, str | None]:
        """Read the six ranks from a comma-separated line or per-rank labels."""
        ranks: dict[str, str | None] = dict.fromkeys(TAXONOMIC_RANKS)
        combined = cls.extract_value(text, CLASSIFICATION_ALIASES)
        if combined and "," in combined:
            parts = [part.strip() for part in combined.split(",")]
            for rank, part in zip(TAXONOMIC_RANKS, parts, strict=False):
                # "Phylum: Mollusca" or "Mollusca (phylum)"
                part = re.sub(rf"^{rank}\s*[:\-]\s*", "", part, flags=re.I)
                part = re.sub(rf"\s*\({rank}\)$", "", part, flags=re.I)
                ranks[rank] = cls.clean_taxon(part)
            return ranks

        for rank in TAXONOMIC_RANKS:
            ranks[rank] = cls.clean_taxon(cls.extract_value(text, (rank,)))
        return ranks

    @staticmethod
    def clean_taxon(value: str | None) -> str | None:
        """Keep the leading taxon word(s), drop trailing commentary."""
        if not value:
            return None
        value = re.split(r"[(;]| - ", value, maxsplit=1)[0]
        value = value.strip().strip(".").strip()
        if value.lower() in EMPTY_VALUES:
            return None
        return value

    @classmethod
    def parse_threats(cls, text: str) -> list[str]:
        """Split the threats section into at most six short phrases."""
        block = cls.extract_block(text, THREAT_ALIASES)
        threats: list[str] = []
        for entry in block:
            for phrase in re.split(r"[,;]", entry):
                phrase = phrase.strip().strip(".").strip()
                if phrase.lower() in EMPTY_VALUES:
                    continue
                if phrase.lower() not in (t.lower() for t in threats):
                    threats.append(phrase)
        return threats[:MAX_THREATS]

    @classmethod
    def parse(cls, text: str) -> SpeciesIdentification:
        """Parse a model answer into a SpeciesIdentification."""
        normalized = cls.normalize(text or "")

        species = cls.extract_value(normalized, SPECIES_ALIASES)
        scientific_name = cls.extract_value(normalized, SCIENTIFIC_ALIASES)
        common_name = cls.extract_value(normalized, COMMON_ALIASES)
        if species is None and scientific_name is not None:
            species = scientific_name

        return SpeciesIdentification(
            species=species,
            scientific_name=scientific_name,
            common_name=common_name,
            confidence=cls.parse_confidence(cls.extract_value(normalized, CONFIDENCE_ALIASES)),
            classification=cls.parse_classification(normalized),
            habitat=cls.extract_value(normalized, HABITAT_ALIASES),
            conservation_status=cls.extract_value(normalized, CONSERVATION_ALIASES),
            threats=cls.parse_threats(normalized),
            description=cls.extract_value(normalized, DESCRIPTION_ALIASES),
            confidence_level="parsed" if species else "low",
            raw_text=text or "",
        )
