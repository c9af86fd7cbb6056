"""
Módulo de análisis con IA.

Extracción de intención, redacción de respuestas (Gemini/Groq) y
generación de embeddings.
"""

from nido.analysis.constraint_extractor import ConstraintExtractor, extract_json_block
from nido.analysis.embeddings import BaseEmbeddingProvider, EmbeddingGenerator
from nido.analysis.response_composer import ResponseComposer, catalog_statistics
from nido.analysis.llm_providers import (
    get_llm_provider,
    BaseLLMProvider,
    GeminiProvider,
    GroqProvider,
)

__all__ = [
    # Extracción y redacción
    "ConstraintExtractor",
    "extract_json_block",
    "ResponseComposer",
    "catalog_statistics",
    # Embeddings
    "BaseEmbeddingProvider",
    "EmbeddingGenerator",
    # Proveedores LLM
    "get_llm_provider",
    "BaseLLMProvider",
    "GeminiProvider",
    "GroqProvider",
]
