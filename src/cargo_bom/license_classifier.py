from __future__ import annotations

import logging
import re
from typing import Optional

from .types import DeclaredFile, Identifiers, LicenseClassification, Missing, Package

logger = logging.getLogger(__name__)

# Not an SPDX parser: grouping parentheses are not understood.
_SEPARATORS = re.compile(r"\s+OR\s+|\s+AND\s+|/")


def split_license_expression(expression: str) -> frozenset[str]:
    tokens = (token.strip() for token in _SEPARATORS.split(expression))
    return frozenset(token for token in tokens if token)


def classify_license(expression: Optional[str], license_file: Optional[str] = None) -> LicenseClassification:
    if expression is not None:
        return Identifiers(split_license_expression(expression))
    if license_file is not None:
        return DeclaredFile(license_file)
    return Missing()


def classify_package(package: Package) -> LicenseClassification:
    classification = classify_license(package.license, package.license_file)
    logger.debug("%s %s: %s", package.name, package.version, classification)
    return classification
