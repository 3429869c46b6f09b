"""
starnotary Registry - ownership challenges and star registration.
"""

from starnotary.registry.ownership import OwnershipVerifier
from starnotary.registry.service import (
    StarRegistryService,
    get_global_registry,
    init_global_registry,
)

__all__ = [
    "OwnershipVerifier",
    "StarRegistryService",
    "init_global_registry",
    "get_global_registry",
]
