from backend.models.leaf_collection import LeafCollection, LeafType, Shift
from backend.models.leaf_count import LeafCount

__all__ = [
    "LeafCollection",
    "LeafType",
    "Shift",
    "LeafCount",
]
