from geo_visibility.query.base import QueryGenerator
from geo_visibility.query.generator import TemplateQueryGenerator, brand_name
from geo_visibility.query.intent import buyer_intent

__all__ = [
    "QueryGenerator",
    "TemplateQueryGenerator",
    "brand_name",
    "buyer_intent",
]
