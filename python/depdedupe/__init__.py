"""depdedupe - version deduplication for dependency tree construction."""

__version__ = "1.0.0"

from .criteria import compare
from .deduper import Deduper, create_deduper
from .errors import DedupeError, InvalidCriteriaError, MissingFieldError, VersionParseError
from .models import Comparison, Criterion, DedupeResult, Entry, Package
from .resolution import DedupeSession, dedupe_packages

__all__ = [
    "__version__",
    "compare",
    "create_deduper",
    "Deduper",
    "DedupeError",
    "InvalidCriteriaError",
    "MissingFieldError",
    "VersionParseError",
    "Comparison",
    "Criterion",
    "DedupeResult",
    "Entry",
    "Package",
    "DedupeSession",
    "dedupe_packages",
]
