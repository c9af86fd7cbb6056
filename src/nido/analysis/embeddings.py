"""
Generador de embeddings para búsqueda semántica.

Usa el modelo gemini-embedding-001 de Google. El mismo modelo y la
misma dimensión se usan para listings (en el seed) y para queries, así
los vectores son comparables.
"""

from abc import ABC, abstractmethod
from typing import Optional

from google import genai
from google.genai import types
import structlog
from tenacity import retry, stop_after_attempt, wait_exponential

from nido.config import get_settings

logger = structlog.get_logger()


class BaseEmbeddingProvider(ABC):
    """Proveedor de embeddings: texto -> vector de dimensión fija."""

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """Embedding de un texto. Sin reintentos: los errores se propagan."""
        pass

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
    )
    async def embed_for_ingestion(self, text: str) -> list[float]:
        """
        Embedding con reintentos, solo para el seed offline.

        El camino de queries en vivo usa embed() directamente.
        """
        return await self.embed(text)


class EmbeddingGenerator(BaseEmbeddingProvider):
    """
    Genera embeddings usando Google's gemini-embedding-001.

    Los embeddings se usan para:
    - Huella semántica de cada listing (calculada una vez en el seed)
    - Búsqueda semántica de queries ("penthouse in Las Vegas")
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        output_dim: Optional[int] = None,
    ):
        settings = get_settings()
        api_key = api_key or settings.gemini_api_key

        if not api_key:
            raise ValueError(
                "GEMINI_API_KEY es requerida para embeddings. "
                "Groq no tiene modelos de embedding, usamos Gemini para esto."
            )

        self.client = genai.Client(api_key=api_key)
        # https://ai.google.dev/gemini-api/docs/embeddings
        self.model_name = model or settings.embedding_model
        self.output_dim = output_dim or settings.embedding_dim
        logger.info("Embedding generator inicializado", model=self.model_name, dim=self.output_dim)

    async def embed(self, text: str) -> list[float]:
        """
        Genera embedding para un texto.

        Args:
            text: Texto a embeber (query o descripción de listing)

        Returns:
            Vector de output_dim dimensiones
        """
        try:
            response = await self.client.aio.models.embed_content(
                model=self.model_name,
                contents=text,
                config=types.EmbedContentConfig(output_dimensionality=self.output_dim),
            )

            embedding = list(response.embeddings[0].values)

            logger.debug(
                "Embedding generado",
                text_length=len(text),
                embedding_dim=len(embedding),
            )

            return embedding

        except Exception as e:
            logger.error(
                "Error generando embedding",
                text=text[:50],
                error=str(e),
            )
            raise
