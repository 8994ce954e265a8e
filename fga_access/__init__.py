"""
FGA_ACCESS - Relationship-based access control on OpenFGA

Manages (subject, relation, object) tuples on an OpenFGA server and
answers access queries derived from them.
"""

from .authz import (
    AuthorizationContext,
    FailSafe,
    OpenFgaAdapter,
    Operation,
    RelationshipProvider,
    RelationTuple,
    initialize_openfga,
    resolve_model_id,
)
from .config import FgaConfig
from .exceptions import (
    ConfigurationError,
    FgaAccessError,
    InitializationError,
    ModelDocumentError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "initialize_openfga",
    "OpenFgaAdapter",
    "RelationshipProvider",
    "AuthorizationContext",
    "RelationTuple",
    "resolve_model_id",
    "Operation",
    "FailSafe",
    # Config
    "FgaConfig",
    # Errors
    "FgaAccessError",
    "InitializationError",
    "ConfigurationError",
    "ModelDocumentError",
]
