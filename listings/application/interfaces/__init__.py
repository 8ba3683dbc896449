from listings.application.interfaces.repositories import (
    IActivityStore,
    IPrincipalLookup,
    IResourceStore,
)

__all__ = ["IActivityStore", "IPrincipalLookup", "IResourceStore"]
