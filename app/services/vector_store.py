"""
Vector store client: Milvus Cloud connection, upsert and top-k query.

Responsibility: Hide Milvus behind the retrieval-store contract
upsert {id, vector, metadata} / query {vector, top_k, include_metadata}.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from app.core.config import COLLECTION_NAME, MILVUS_TOKEN, MILVUS_URI, VECTOR_DIM
from app.core.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)

METADATA_FIELDS = ["text", "source"]
ID_MAX_LENGTH = 64


def get_milvus_client() -> Any:
    """
    Connect to Milvus Cloud and return a client. Creates the collection if it
    does not exist (string primary key, COSINE metric, dynamic metadata fields).
    """
    if not MILVUS_URI or not MILVUS_TOKEN:
        raise ServiceUnavailableError("MILVUS_URI and MILVUS_TOKEN must be set in .env")

    from pymilvus import MilvusClient
    from pymilvus.exceptions import MilvusException

    try:
        client = MilvusClient(uri=MILVUS_URI, token=MILVUS_TOKEN)
        if not client.has_collection(COLLECTION_NAME):
            client.create_collection(
                collection_name=COLLECTION_NAME,
                dimension=VECTOR_DIM,
                primary_field_name="id",
                id_type="string",
                max_length=ID_MAX_LENGTH,
                vector_field_name="vector",
                metric_type="COSINE",
                auto_id=False,
            )
            logger.info("Collection %s created (dim=%s)", COLLECTION_NAME, VECTOR_DIM)
    except MilvusException as e:
        logger.warning("[vector_store] Milvus unavailable: %s", e)
        raise ServiceUnavailableError("The vector store is unavailable.") from e
    return client


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    """Map Milvus failures during an operation to ServiceUnavailableError."""
    from pymilvus.exceptions import MilvusException

    try:
        yield
    except MilvusException as e:
        logger.warning("[vector_store:%s] Milvus error: %s", operation, e)
        raise ServiceUnavailableError("The vector store is unavailable.") from e


def upsert_vectors(records: list[dict]) -> int:
    """
    Upsert records shaped {id, vector, metadata}. Metadata keys are stored as
    dynamic fields next to the vector. Returns the number of rows written.
    """
    if not records:
        return 0
    rows = [{"id": r["id"], "vector": r["vector"], **(r.get("metadata") or {})} for r in records]
    client = get_milvus_client()
    with _store_errors("upsert_vectors"):
        client.upsert(collection_name=COLLECTION_NAME, data=rows)
    logger.info("[vector_store:upsert_vectors] upserted %d rows", len(rows))
    return len(rows)


def query_vectors(vector: list[float], top_k: int, include_metadata: bool = True) -> list[dict]:
    """Return up to top_k matches ranked by similarity: [{id, score, metadata}]."""
    logger.info("[vector_store:query_vectors] IN  top_k=%d include_metadata=%s", top_k, include_metadata)
    client = get_milvus_client()
    with _store_errors("query_vectors"):
        results = client.search(
            collection_name=COLLECTION_NAME,
            data=[vector],
            limit=top_k,
            output_fields=METADATA_FIELDS if include_metadata else [],
        )
    # results: list of list of hits (one list per query vector)
    hits = results[0] if results else []
    matches = []
    for h in hits:
        entity = h.get("entity") or {}
        matches.append({
            "id": h.get("id"),
            "score": float(h.get("distance", 0.0)),
            "metadata": {k: entity.get(k) for k in METADATA_FIELDS if k in entity} if include_metadata else {},
        })
    logger.info("[vector_store:query_vectors] OUT matches=%d scores=%s", len(matches), [round(m["score"], 4) for m in matches])
    return matches
