from .fetch_models import FetchSpec, FetchRequest, SnapshotRequestBody

__all__ = ["FetchSpec", "FetchRequest", "SnapshotRequestBody"]
