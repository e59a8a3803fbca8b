"""Course progress tracking module.

Provides:
- Lesson completion updates (by position or by stable lesson id)
- Course completion percentage, derived on read
"""

from .schemas import CourseProgress
from .service import ProgressService, compute_progress


__all__ = [
    "CourseProgress",
    "ProgressService",
    "compute_progress",
]
