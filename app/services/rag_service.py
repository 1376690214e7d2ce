"""
RAG: ingest documents into the vector store and answer queries grounded in them.

Two-stage pattern for queries: embed query → fetch top-k → concatenate matched
text as context → one generation call. Failures in either stage propagate.
"""

import logging
import uuid

from app.agent.llm import chat_completion, embed_texts
from app.core.config import RAG_TOP_K
from app.core.errors import InputError, UpstreamContentError
from app.services.text_processing import build_context, split_paragraphs
from app.services.vector_store import query_vectors, upsert_vectors

logger = logging.getLogger(__name__)

RAG_SYSTEM_PROMPT = (
    "You are a helpful assistant that answers questions based on the provided context. "
    "If the answer cannot be found in the context, explicitly state that based on the information you have."
)
NO_CONTEXT_SYSTEM_PROMPT = (
    "You are a helpful assistant. The user asked a question, but no relevant information was found "
    "in the document. Please inform the user of this."
)


def ingest_document(text: str, source: str = "") -> int:
    """
    Split text into paragraphs, embed them and upsert one vector per paragraph.
    Returns the number of chunks stored.
    """
    chunks = split_paragraphs(text or "")
    if not chunks:
        raise InputError("Document is empty")
    logger.info("[rag_service:ingest_document] IN  source=%r chunks=%d", source, len(chunks))
    vectors = embed_texts(chunks)
    records = [
        {"id": uuid.uuid4().hex, "vector": vec, "metadata": {"text": chunk, "source": source}}
        for chunk, vec in zip(chunks, vectors)
    ]
    stored = upsert_vectors(records)
    logger.info("[rag_service:ingest_document] OUT stored=%d", stored)
    return stored


def answer_query(query: str, top_k: int = RAG_TOP_K) -> str:
    """Answer query from the top_k matching paragraphs, or say nothing relevant was found."""
    if not query or not str(query).strip():
        raise InputError("Query is required")
    q = str(query).strip()
    logger.info("[rag_service:answer_query] IN  query=%r top_k=%d", q, top_k)

    vectors = embed_texts([q])
    if not vectors:
        raise UpstreamContentError("Embedding provider returned no vector for the query.")
    matches = query_vectors(vectors[0], top_k=top_k, include_metadata=True)
    context = build_context(matches)
    logger.info("[rag_service:answer_query] matches=%d context_len=%d", len(matches), len(context))

    if not matches or not context.strip():
        message = chat_completion(
            messages=[
                {"role": "system", "content": NO_CONTEXT_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": f'Regarding your question: "{q}"\n\n'
                    "I could not find relevant information in the uploaded document to provide an answer.",
                },
            ],
            temperature=0.5,
            max_tokens=150,
        )
    else:
        message = chat_completion(
            messages=[
                {"role": "system", "content": RAG_SYSTEM_PROMPT},
                {"role": "user", "content": f"Context:\n{context}\n\nQuestion: {q}"},
            ],
            max_tokens=500,
        )
    answer = (message.content or "").strip()
    if not answer:
        raise UpstreamContentError("The model returned an empty response.")
    logger.info("[rag_service:answer_query] OUT answer_len=%d", len(answer))
    return answer
