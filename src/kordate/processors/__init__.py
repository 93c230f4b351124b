"""Extraction Engine

Pattern registry, semantic interpreters and the extractor that reconciles
their matches.
"""

from .calendar_utils import CivilDate, FillPolicy, Hms
from .patterns import DATE, TIME, PatternClass, PatternRule
from .temporal_extractor import TemporalExtractor, TemporalMatch

__all__ = [
    "CivilDate",
    "FillPolicy",
    "Hms",
    "DATE",
    "TIME",
    "PatternClass",
    "PatternRule",
    "TemporalExtractor",
    "TemporalMatch"
]
