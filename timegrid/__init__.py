from .data.names import NameNormalizer, normalize
from .errors import ErrorKind, ScheduleError
from .importer.grid import ImportPipeline
from .models.entry import ClassEntry
from .models.index import SlotIndex
from .ops.allocation import AllocationOps
from .ops.results import BulkResult, OpResult
from .validate.conflicts import ConflictDetector, ConflictReport

__version__ = "0.1.0"

__all__ = [
    "AllocationOps",
    "BulkResult",
    "ClassEntry",
    "ConflictDetector",
    "ConflictReport",
    "ErrorKind",
    "ImportPipeline",
    "NameNormalizer",
    "OpResult",
    "ScheduleError",
    "SlotIndex",
    "normalize",
]
