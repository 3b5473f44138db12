from .store import AdminStoreViewSet, PublicStoreViewSet

__all__ = ["AdminStoreViewSet", "PublicStoreViewSet"]
