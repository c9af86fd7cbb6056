"""
Extractor de intención y restricciones.

Convierte la query libre en {queryType, filters} pidiéndole al LLM un
JSON con esquema fijo. Nunca lanza: ante cualquier falla devuelve una
búsqueda semántica sin filtros.
"""

import json
from typing import Optional

import structlog
from pydantic import ValidationError

from nido.analysis.llm_providers import get_llm_provider, BaseLLMProvider
from nido.config import get_settings
from nido.models import PropertyType, QueryIntent

logger = structlog.get_logger()

_PROPERTY_TYPES = ", ".join(t.value for t in PropertyType if t is not PropertyType.OTHER)

EXTRACTION_PROMPT_TEMPLATE = """You are the query parser of a real estate search assistant.
Classify the user query and extract search constraints.

Return ONLY a JSON object with this exact structure:
{{
  "queryType": "informational" | "search",
  "filters": {{
    "minPrice": number,
    "maxPrice": number,
    "bedrooms": integer,
    "minBedrooms": true | false,
    "bathrooms": number,
    "minBathrooms": true | false,
    "location": string,
    "property_type": string
  }}
}}

RULES:
1. "informational" is for general questions about the catalog ("How many properties do you have?",
   "What is the average price?"). Anything asking to find, show or list properties is "search".
2. Omit every filter the query does not mention. Never invent values.
3. Room counts: "3-bedroom", "3 bed" or a bare count mean EXACTLY that count (minBedrooms false).
   "at least 3 bedrooms", "3+ bedrooms", "3 or more bedrooms" set minBedrooms true. Same for bathrooms.
4. "under 500000" / "below" / "max" set maxPrice. "over" / "above" / "at least" set minPrice.
   Write prices as plain numbers (500k -> 500000, 1.2M -> 1200000).
5. location is the city or area as written in the query (e.g. "Atlanta", "Las Vegas").
6. property_type is one of: {property_types}. Keep the user's word if unsure, even if misspelled.
7. Superlatives like "cheapest" or "largest" are not filters.

User query: {query}"""


def extract_json_block(text: str) -> Optional[str]:
    """
    Devuelve el primer bloque {...} balanceado del texto.

    Tolera prosa o code fences alrededor del JSON y llaves dentro de
    strings. None si no hay un bloque cerrado.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]
    return None


class ConstraintExtractor:
    """
    Clasifica la query (informational/search) y extrae filtros con LLM.

    La degradación es local: un error de red, una respuesta vacía o un
    JSON inválido se traducen en QueryIntent.unconstrained().
    """

    def __init__(self, provider: Optional[BaseLLMProvider] = None):
        self._settings = get_settings()
        self._provider = provider or get_llm_provider()

    def _build_prompt(self, query: str) -> str:
        return EXTRACTION_PROMPT_TEMPLATE.format(
            property_types=_PROPERTY_TYPES,
            query=query,
        )

    def parse(self, raw_text: str) -> QueryIntent:
        """Parsea la respuesta del LLM. Lanza ValueError si no es usable."""
        block = extract_json_block(raw_text or "")
        if block is None:
            raise ValueError("La respuesta no contiene un objeto JSON")

        data = json.loads(block)
        if not isinstance(data, dict) or "queryType" not in data:
            raise ValueError("Falta el campo queryType")
        data["queryType"] = str(data["queryType"]).strip().lower()
        if data.get("filters") is None:
            data["filters"] = {}

        return QueryIntent.model_validate(data)

    async def extract(self, query: str) -> QueryIntent:
        """
        Extrae la intención de una query.

        Args:
            query: Texto libre del usuario

        Returns:
            QueryIntent (neutro si la extracción falla)
        """
        raw_text = ""
        try:
            raw_text = await self._provider.complete(
                self._build_prompt(query),
                temperature=self._settings.extraction_temperature,
                max_tokens=300,
            )
            intent = self.parse(raw_text)

        except (ValueError, ValidationError) as e:
            # json.JSONDecodeError es subclase de ValueError
            logger.warning(
                "Respuesta de extracción inválida, búsqueda sin filtros",
                query=query[:80],
                response=raw_text[:200],
                error=str(e),
            )
            return QueryIntent.unconstrained()

        except Exception as e:
            logger.warning(
                "Error en extracción de filtros, búsqueda sin filtros",
                query=query[:80],
                error=str(e),
            )
            return QueryIntent.unconstrained()

        logger.info(
            "Intención extraída",
            query_type=intent.query_type.value,
            filters=intent.filters.model_dump(exclude_none=True, exclude_defaults=True),
        )
        return intent
