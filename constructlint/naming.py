"""
Name normalization for CloudFormation attribute names.
"""
import re
from typing import Dict, Tuple

_LEADING_SEPARATORS_RE = re.compile(r"^[_.\- ]+")
_SEPARATOR_WORD_RE = re.compile(r"[_.\- ]+(\w|$)")
_NUMBER_WORD_RE = re.compile(r"\d+(\w|$)")

# (resource basename, raw attribute name) -> property name.
# Consulted before the generic pascal-case transform.
ATTRIBUTE_NAME_OVERRIDES: Dict[Tuple[str, str], str] = {
    ("SecurityGroup", "GroupId"): "Id",
}


def _is_upper(ch: str) -> bool:
    return ch.upper() == ch and ch.lower() != ch


def _is_lower(ch: str) -> bool:
    return ch.lower() == ch and ch.upper() != ch


def _split_camel_humps(value: str) -> str:
    """
    Insert "-" at camel-case word boundaries:
      GroupId      → Group-Id
      DBClusterArn → DB-Cluster-Arn
    """
    last_lower = False
    last_upper = False
    last_last_upper = False
    i = 0
    while i < len(value):
        ch = value[i]
        if last_lower and _is_upper(ch):
            value = value[:i] + "-" + value[i:]
            last_lower = False
            last_last_upper = last_upper
            last_upper = True
            i += 1
        elif last_upper and last_last_upper and _is_lower(ch):
            value = value[: i - 1] + "-" + value[i - 1:]
            last_last_upper = last_upper
            last_upper = False
            last_lower = True
        else:
            last_lower = _is_lower(ch)
            last_last_upper = last_upper
            last_upper = _is_upper(ch)
        i += 1
    return value


def pascal_case(name: str) -> str:
    """Convert ``name`` to PascalCase, collapsing ``_ . - space`` separators into word boundaries."""
    value = name.strip()
    if not value:
        return ""
    if len(value) == 1:
        return value.upper()

    if value != value.lower():
        value = _split_camel_humps(value)

    value = _LEADING_SEPARATORS_RE.sub("", value).lower()
    value = value[:1].upper() + value[1:]

    value = _SEPARATOR_WORD_RE.sub(lambda m: m.group(1).upper(), value)
    return _NUMBER_WORD_RE.sub(lambda m: m.group(0).upper(), value)


def attribute_name(basename: str, raw_name: str) -> str:
    """Property name generated for CloudFormation attribute ``raw_name`` of resource ``basename``."""
    override = ATTRIBUTE_NAME_OVERRIDES.get((basename, raw_name))
    if override is not None:
        return override
    return pascal_case(raw_name)
