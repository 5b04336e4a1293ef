from .mapping_store import MappingStore
from .ingest import MappingChannel, MappingSender, drain

__all__ = ["MappingStore", "MappingChannel", "MappingSender", "drain"]
