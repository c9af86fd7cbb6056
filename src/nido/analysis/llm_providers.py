"""
Abstracción de proveedores LLM.

Un único método complete(prompt) -> texto, para poder switchear entre
proveedores (Gemini, Groq) sin tocar el extractor ni el compositor.
"""

from abc import ABC, abstractmethod
from typing import Optional

import structlog

from nido.config import get_settings

logger = structlog.get_logger()


class BaseLLMProvider(ABC):
    """Clase base para proveedores de LLM."""

    provider_name: str = "base"

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 1024,
    ) -> str:
        """
        Genera una respuesta del LLM.

        Args:
            prompt: Prompt completo
            temperature: Temperatura de generación (0.0-1.0)
            max_tokens: Máximo de tokens a generar

        Returns:
            Texto generado
        """
        pass


class GeminiProvider(BaseLLMProvider):
    """Proveedor de Google Gemini."""

    provider_name = "gemini"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        from google import genai

        settings = get_settings()
        self.api_key = api_key or settings.gemini_api_key
        self.model = model or settings.gemini_model

        if not self.api_key:
            raise ValueError("GEMINI_API_KEY no configurada")

        self.client = genai.Client(api_key=self.api_key)
        logger.info("GeminiProvider inicializado", model=self.model)

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 1024,
    ) -> str:
        from google.genai import types

        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=temperature,
                top_p=0.8,
                max_output_tokens=max_tokens,
            ),
        )

        return (response.text or "").strip()


class GroqProvider(BaseLLMProvider):
    """
    Proveedor de Groq (LPU inference).

    Modelos disponibles:
    - llama-3.1-8b-instant: Rápido y económico
    - llama-3.3-70b-versatile: Más capaz

    Docs: https://console.groq.com/docs/models
    """

    provider_name = "groq"

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        from groq import AsyncGroq

        settings = get_settings()
        self.api_key = api_key or settings.groq_api_key
        self.model = model or settings.groq_model

        if not self.api_key:
            raise ValueError("GROQ_API_KEY no configurada")

        self.client = AsyncGroq(api_key=self.api_key)
        logger.info("GroqProvider inicializado", model=self.model)

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 1024,
    ) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
            max_tokens=max_tokens,
        )

        text = response.choices[0].message.content or ""
        if response.usage:
            logger.debug("Tokens usados", provider=self.provider_name, tokens=response.usage.total_tokens)

        return text.strip()


def get_llm_provider(
    provider: Optional[str] = None,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
) -> BaseLLMProvider:
    """
    Factory para obtener el proveedor de LLM configurado.

    Args:
        provider: 'gemini' o 'groq' (default: settings.llm_provider)
        api_key: API key (default: del settings según provider)
        model: Modelo a usar (default: del settings según provider)

    Returns:
        Instancia del proveedor configurado
    """
    settings = get_settings()
    provider = provider or settings.llm_provider

    if provider.lower() == "groq":
        return GroqProvider(api_key=api_key, model=model)
    elif provider.lower() == "gemini":
        return GeminiProvider(api_key=api_key, model=model)
    else:
        raise ValueError(f"Proveedor LLM no soportado: {provider}. Usar 'gemini' o 'groq'")
