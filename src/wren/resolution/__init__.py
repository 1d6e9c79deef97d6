"""Action resolution: from stored route actions to callable handlers.

The resolution strategy (``ClassResolver``) is passed in explicitly;
there is no process-wide container.
"""

from wren.resolution.actions import ActionKind, ActionResolver, classify_action
from wren.resolution.resolvers import ClassResolver, ConstructorResolver, ContainerResolver

__all__ = [
    "ActionKind",
    "ActionResolver",
    "ClassResolver",
    "ConstructorResolver",
    "ContainerResolver",
    "classify_action",
]
