"""
Ingesta offline del catálogo.
"""

from nido.ingestion.seeder import (
    CatalogSeeder,
    extract_property_type,
    generate_description,
    merge_property_data,
)

__all__ = [
    "CatalogSeeder",
    "extract_property_type",
    "generate_description",
    "merge_property_data",
]
