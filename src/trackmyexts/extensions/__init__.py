"""Editor extension management."""

from trackmyexts.extensions.fallback import (
    FallbackAction,
    FallbackExhausted,
    FallbackExtensionManager,
)
from trackmyexts.extensions.manager import (
    EditorExtensionManager,
    create_extension_manager,
)

__all__ = [
    "EditorExtensionManager",
    "FallbackAction",
    "FallbackExhausted",
    "FallbackExtensionManager",
    "create_extension_manager",
]
