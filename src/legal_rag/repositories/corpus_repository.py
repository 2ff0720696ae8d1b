"""Supabase-backed access to the document corpus."""

from postgrest import CountMethod
from supabase import AsyncClient

from legal_rag.core.logging import get_logger
from legal_rag.schemas.documents import CorpusDocument

logger = get_logger(__name__)


class SupabaseCorpusRepository:
    """Reads corpus documents from a Supabase table."""

    def __init__(self, async_client: AsyncClient, table: str):
        self.client: AsyncClient = async_client
        self.table = table

    async def list_all_documents(self) -> list[CorpusDocument]:
        """Fetch every corpus row ordered by id."""
        response = await self.client.table(self.table).select("*").order("id").execute()
        documents = [CorpusDocument.model_validate(row) for row in response.data]
        logger.info("Loaded %s corpus documents from '%s'", len(documents), self.table)
        return documents

    async def count_documents(self) -> int:
        response = await (
            self.client.table(self.table).select("id", count=CountMethod.exact).limit(1).execute()
        )
        return response.count or 0
