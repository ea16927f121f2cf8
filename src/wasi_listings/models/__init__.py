from .base import PropertyType, ScrapedProperty

__all__ = ["PropertyType", "ScrapedProperty"]
