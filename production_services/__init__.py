"""
production_services -- orchestration over the lifecycle engines.

Services hold injected collaborators (persistence, clock, calendar) and
delegate every computation to ``production_engines``.
"""

from production_services.lifecycle_service import (
    ProjectLifecycleService,
    ProjectStore,
    ProjectView,
)

__all__ = [
    "ProjectLifecycleService",
    "ProjectStore",
    "ProjectView",
]
