"""
Configuración centralizada del sistema.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Encontrar la raíz del proyecto (donde está el .env)
# config.py -> nido/ -> src/ -> project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Configuración principal de la aplicación."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase (opcional: el store en memoria no lo necesita)
    supabase_url: Optional[str] = Field(None, description="URL del proyecto Supabase")
    supabase_key: Optional[str] = Field(None, description="Anon key de Supabase")
    supabase_service_key: Optional[str] = Field(
        None, description="Service role key para operaciones admin"
    )
    listings_table: str = Field("listings", description="Tabla de propiedades")

    # LLM Provider
    llm_provider: str = Field(
        "gemini",
        description="Proveedor de LLM a usar: 'gemini' o 'groq'"
    )

    # Gemini
    gemini_api_key: Optional[str] = Field(None, description="API key de Google Gemini")
    gemini_model: str = Field("gemini-2.0-flash", description="Modelo de Gemini a usar")

    # Groq
    groq_api_key: Optional[str] = Field(None, description="API key de Groq")
    groq_model: str = Field(
        "llama-3.1-8b-instant",
        description="Modelo de Groq a usar (llama-3.1-8b-instant, llama-3.3-70b-versatile)"
    )

    # Embeddings
    embedding_model: str = Field(
        "gemini-embedding-001", description="Modelo de embedding de Gemini"
    )
    embedding_dim: int = Field(768, gt=0, description="Dimensión de los vectores")

    # Búsqueda
    display_limit: int = Field(
        5, ge=1, description="Máximo de propiedades devueltas en búsqueda semántica"
    )
    fallback_display_limit: int = Field(
        10, ge=1, description="Máximo de propiedades cuando se usó un fallback"
    )
    oversampling_factor: int = Field(
        5, ge=1, description="Multiplicador del pool de candidatos semánticos"
    )
    fuzzy_match_threshold: float = Field(
        0.75, ge=0.0, le=1.0, description="Umbral de similitud para tolerar typos"
    )
    min_title_word_length: int = Field(
        3, ge=0, description="Palabras de la query más largas que esto se buscan en títulos"
    )

    # Generación
    extraction_temperature: float = Field(0.0, ge=0.0, le=1.0)
    generation_temperature: float = Field(0.7, ge=0.0, le=1.0)

    # Logging
    log_level: str = Field("INFO", description="Nivel de logging")

    @property
    def candidate_pool_size(self) -> int:
        """Tamaño del pool semántico previo al filtrado."""
        return self.display_limit * self.oversampling_factor


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración cacheada."""
    return Settings()


# Patrones título -> categoría, en orden de prioridad (gana el primero)
PROPERTY_TYPE_PATTERNS = [
    ("Apartment", r"apartment|bhk"),
    ("Condo", r"condo"),
    ("Villa", r"villa"),
    ("House", r"\bhouse\b"),
    ("Penthouse", r"penthouse"),
    ("Studio", r"studio"),
    ("Townhouse", r"townhouse"),
    ("Duplex", r"duplex"),
    ("Loft", r"loft"),
    ("Bungalow", r"bungalow"),
    ("Brownstone", r"brownstone"),
    ("Chalet", r"chalet"),
    ("Estate", r"estate"),
    ("Cabin", r"cabin"),
    ("Mansion", r"mansion"),
]

# Fuentes crudas que se mergean por id durante el seed
SEED_FILES = {
    "basics": "property_basics.json",
    "characteristics": "property_characteristics.json",
    "images": "property_images.json",
}
