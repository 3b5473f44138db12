from .store import StoreSerializer, StoreSummarySerializer

__all__ = ["StoreSerializer", "StoreSummarySerializer"]
