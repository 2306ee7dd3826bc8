"""BUMBA - department/specialist routing for development tasks.

Turns a free-text task request into a routing plan:
- Intent analysis (primary intent, departments, specialists, patterns)
- Specialist resolution against a static capability table
- Routing plan construction with per-agent model tiering
"""

__version__ = "2.0.0"
__all__ = []
