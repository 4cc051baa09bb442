"""Rule-based field extraction using regex patterns.

Pulls the name, date of birth, ID number, and blood group out of ID
card OCR text. Two rule sets exist: ``labelled`` reads the raw text
where each label sits on its own line, and ``normalized`` first
flattens punctuation and line breaks, which suits the sparse-text
output of the LSTM profile.
"""

import re
from enum import StrEnum

from idcard_ocr.utils.logger import get_logger

logger = get_logger(__name__)

NAME = "Name"
BLOOD_GROUP = "Blood Group"
DATE_OF_BIRTH = "Date of Birth"
ID_NUMBER = "ID Number"


class RuleSet(StrEnum):
    """Available extraction rule sets."""

    NONE = "none"
    LABELLED = "labelled"
    NORMALIZED = "normalized"


# Labelled-line patterns
_LABELLED_NAME = re.compile(r"\bName\s*\n(.+)", re.IGNORECASE)
_LABELLED_BLOOD_GROUP = re.compile(
    r"Blood Group:\s*((?:AB|A|B|O)[+-])", re.IGNORECASE
)
_LABELLED_DOB = re.compile(
    r"Date\s*of\s*Birth\s*(\d{2}\s\w{3}\s\d{4})", re.IGNORECASE
)
_LABELLED_ID = re.compile(r"\b(\d{10})\b")

# Normalized-text patterns
_NOISE = re.compile(r"[\s\W]+")
_NORMALIZED_NAME = re.compile(
    r"(Name|Full\s*Name)[:\s]*([A-Za-z]+(?:\s+[A-Za-z]+)*)", re.IGNORECASE
)
_NORMALIZED_DOB = re.compile(r"(\d{1,2}\s*[A-Za-z]{3})\s*(\d{4})")
_NORMALIZED_ID = re.compile(r"\b(\d{10}|\d{13}|\d{16}|\d{17})\b")

# Card furniture that the greedy name pattern tends to swallow
_NAME_ARTIFACT_WORDS = re.compile(r"\b(National|ID|Card)\b")
_DIGITS = re.compile(r"\d+")
_MULTI_SPACE = re.compile(r"\s{2,}")


def normalize_text(text: str) -> str:
    """Collapse whitespace and punctuation runs into single spaces."""
    return _NOISE.sub(" ", text).strip()


def clean_name(name: str) -> str:
    """Strip OCR artifacts such as digits and card labels from a name.

    Args:
        name: Raw captured name, e.g. ``"S5HAIE National ID Card"``.

    Returns:
        Cleaned name, possibly empty.
    """
    cleaned = _DIGITS.sub("", name)
    cleaned = _NAME_ARTIFACT_WORDS.sub("", cleaned)
    cleaned = _MULTI_SPACE.sub(" ", cleaned)
    return cleaned.strip()


class RuleExtractor:
    """Regex-based field extractor for ID card text.

    Args:
        rule_set: Which family of patterns to apply.
    """

    def __init__(self, rule_set: RuleSet = RuleSet.LABELLED) -> None:
        self.rule_set = RuleSet(rule_set)

    def extract(self, text: str) -> dict[str, str]:
        """Extract fields from OCR text.

        Args:
            text: OCR text to search.

        Returns:
            Mapping of field display name to value. Fields whose rule did
            not match are absent.
        """
        if self.rule_set is RuleSet.LABELLED:
            fields = extract_labelled(text)
        elif self.rule_set is RuleSet.NORMALIZED:
            fields = extract_normalized(text)
        else:
            fields = {}

        logger.info(
            "Rule extraction (%s) found %d fields", self.rule_set.value, len(fields)
        )
        return fields


def extract_labelled(text: str) -> dict[str, str]:
    """Apply the labelled-line rules to raw OCR text."""
    fields: dict[str, str] = {}

    match = _LABELLED_NAME.search(text)
    if match:
        fields[NAME] = match.group(1).strip()

    match = _LABELLED_BLOOD_GROUP.search(text)
    if match:
        fields[BLOOD_GROUP] = match.group(1).strip()

    match = _LABELLED_DOB.search(text)
    if match:
        fields[DATE_OF_BIRTH] = match.group(1).strip()

    match = _LABELLED_ID.search(text)
    if match:
        fields[ID_NUMBER] = match.group(1)

    return fields


def extract_normalized(text: str) -> dict[str, str]:
    """Apply the normalized-text rules to OCR text."""
    fields: dict[str, str] = {}
    flat = normalize_text(text)

    match = _NORMALIZED_NAME.search(flat)
    if match:
        fields[NAME] = clean_name(match.group(2))

    match = _NORMALIZED_DOB.search(flat)
    if match:
        fields[DATE_OF_BIRTH] = f"{match.group(1).strip()} {match.group(2).strip()}"

    match = _NORMALIZED_ID.search(flat)
    if match:
        fields[ID_NUMBER] = match.group(1)

    return fields
