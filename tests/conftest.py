# conftest.py
import pytest
import pytest_asyncio
from llama_index.core import Settings as LlamaIndexSettings
from llama_index.core.embeddings.mock_embed_model import MockEmbedding
from qdrant_client import AsyncQdrantClient

from legal_rag.config import Settings
from legal_rag.core.constants import STORE_PASSAGES, STORE_SEGMENTS
from legal_rag.repositories.segment_repository import QdrantSegmentRepository, QdrantStoreAdmin
from legal_rag.services.qdrant_service import QdrantService


# Set up mock embedding model globally for all tests
@pytest.fixture(scope="session", autouse=True)
def setup_mock_embedding():
    """Configure LlamaIndex to use mock embeddings for all tests."""
    LlamaIndexSettings.embed_model = MockEmbedding(embed_dim=1536)
    yield
    # Reset after tests
    LlamaIndexSettings.embed_model = None


@pytest_asyncio.fixture
async def aclient_local():
    """In-memory embedded Qdrant for tests."""
    client = AsyncQdrantClient(path=":memory:")
    try:
        yield client
    finally:
        await client.close()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        segment_collection_name="test-segments",
        passage_collection_name="test-passages",
        qdrant_url="http://unused-in-local-mode",
        qdrant_api_key=None,
        qdrant_prefer_grpc=False,
        embedding_dim=1536,
    )


@pytest_asyncio.fixture
async def qdrant_service(aclient_local: AsyncQdrantClient, test_settings: Settings):
    svc = QdrantService(test_settings, test_settings.segment_collection_name, aclient=aclient_local)
    await svc.ensure_schema()
    yield svc


@pytest_asyncio.fixture
async def passage_qdrant_service(aclient_local: AsyncQdrantClient, test_settings: Settings):
    svc = QdrantService(test_settings, test_settings.passage_collection_name, aclient=aclient_local)
    await svc.ensure_schema()
    yield svc


@pytest.fixture
def segment_repository(qdrant_service: QdrantService) -> QdrantSegmentRepository:
    return QdrantSegmentRepository(qdrant_service, MockEmbedding(embed_dim=1536))


@pytest.fixture
def store_admin(
    qdrant_service: QdrantService, passage_qdrant_service: QdrantService
) -> QdrantStoreAdmin:
    return QdrantStoreAdmin({STORE_SEGMENTS: qdrant_service, STORE_PASSAGES: passage_qdrant_service})
