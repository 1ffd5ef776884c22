"""Port interfaces (Protocols).

The builder depends only on these; concrete hook objects and id
strategies are injected at construction.
"""

from .hooks import BuilderHooks, CallbackHooks
from .id_gen import NodeIdProvider, SequentialNodeIdProvider, UuidNodeIdProvider

__all__ = [
    "BuilderHooks",
    "CallbackHooks",
    "NodeIdProvider",
    "SequentialNodeIdProvider",
    "UuidNodeIdProvider",
]
