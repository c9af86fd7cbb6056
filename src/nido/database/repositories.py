"""
Repositorios de propiedades.

ListingStore define el contrato de lectura que usa el pipeline de
búsqueda; ListingRepository lo implementa sobre Supabase.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

import structlog

from nido.config import get_settings
from nido.database.supabase_client import get_supabase_client, SupabaseClient
from nido.models import Listing

logger = structlog.get_logger()


class ListingStore(ABC):
    """
    Acceso al pool completo de listings.

    El pipeline de queries solo lee. replace_all() es para el seed,
    que corre offline y en exclusiva.
    """

    @abstractmethod
    def find_all(self) -> list[Listing]:
        """Todos los listings, en orden estable por id."""
        pass

    @abstractmethod
    def replace_all(self, listings: Iterable[Listing]) -> int:
        """Reemplaza todo el contenido. Devuelve la cantidad insertada."""
        pass

    def get_by_id(self, listing_id: int) -> Optional[Listing]:
        for listing in self.find_all():
            if listing.id == listing_id:
                return listing
        return None

    def get_by_ids(self, listing_ids: list[int]) -> list[Listing]:
        """Listings en el orden de listing_ids; ids desconocidos se omiten."""
        by_id = {listing.id: listing for listing in self.find_all()}
        return [by_id[i] for i in listing_ids if i in by_id]

    def count(self) -> int:
        return len(self.find_all())


class BaseRepository:
    """Clase base para repositorios."""

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or get_supabase_client()

    @property
    def client(self) -> SupabaseClient:
        return self._client


class ListingRepository(BaseRepository, ListingStore):
    """Repositorio para la tabla de listings en Supabase."""

    PAGE_SIZE = 1000
    INSERT_BATCH_SIZE = 100

    def __init__(self, client: Optional[SupabaseClient] = None, table: Optional[str] = None):
        super().__init__(client)
        self.table_name = table or get_settings().listings_table

    def find_all(self) -> list[Listing]:
        """
        Obtiene todos los listings.

        PostgREST limita las filas por request, así que se pagina con range().
        """
        rows = []
        start = 0
        while True:
            response = (
                self.client.table(self.table_name)
                .select("*")
                .order("id")
                .range(start, start + self.PAGE_SIZE - 1)
                .execute()
            )
            rows.extend(response.data)
            if len(response.data) < self.PAGE_SIZE:
                break
            start += self.PAGE_SIZE

        listings = [Listing.model_validate(row) for row in rows]
        logger.debug("Listings cargados", total=len(listings))
        return listings

    def get_by_id(self, listing_id: int) -> Optional[Listing]:
        """Obtiene un listing por su id numérico."""
        response = (
            self.client.table(self.table_name)
            .select("*")
            .eq("id", listing_id)
            .limit(1)
            .execute()
        )
        return Listing.model_validate(response.data[0]) if response.data else None

    def get_by_ids(self, listing_ids: list[int]) -> list[Listing]:
        if not listing_ids:
            return []
        response = (
            self.client.table(self.table_name)
            .select("*")
            .in_("id", listing_ids)
            .execute()
        )
        by_id = {row["id"]: Listing.model_validate(row) for row in response.data}
        return [by_id[i] for i in listing_ids if i in by_id]

    def count(self) -> int:
        response = (
            self.client.table(self.table_name)
            .select("id", count="exact")
            .limit(1)
            .execute()
        )
        return response.count or 0

    def replace_all(self, listings: Iterable[Listing]) -> int:
        """
        Borra la tabla e inserta los listings en batches.

        Solo para el seed: no es atómico.
        """
        self.client.table(self.table_name).delete().gte("id", 0).execute()
        logger.info("Listings existentes eliminados", table=self.table_name)

        data = [listing.to_db_dict() for listing in listings]
        inserted = 0
        for start in range(0, len(data), self.INSERT_BATCH_SIZE):
            batch = data[start:start + self.INSERT_BATCH_SIZE]
            response = self.client.table(self.table_name).insert(batch).execute()
            inserted += len(response.data)

        logger.info("Listings insertados", table=self.table_name, inserted=inserted)
        return inserted
