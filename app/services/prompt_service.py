"""
Direct prompting: one prompt in, one completion out. No tools, no retrieval.
"""

import logging

from app.agent.llm import chat_completion
from app.core.config import BASIC_MAX_TOKENS
from app.core.errors import InputError, UpstreamContentError

logger = logging.getLogger(__name__)

BASIC_SYSTEM_PROMPT = "You are a helpful assistant that provides clear and concise responses."


def answer_prompt(prompt: str) -> str:
    """Answer a free-text prompt with a single completion."""
    if not prompt or not str(prompt).strip():
        raise InputError("Prompt is required")
    p = str(prompt).strip()
    logger.info("[prompt_service:answer_prompt] IN  prompt_len=%d", len(p))
    message = chat_completion(
        messages=[
            {"role": "system", "content": BASIC_SYSTEM_PROMPT},
            {"role": "user", "content": p},
        ],
        max_tokens=BASIC_MAX_TOKENS,
    )
    answer = (message.content or "").strip()
    if not answer:
        raise UpstreamContentError("The model returned an empty response.")
    logger.info("[prompt_service:answer_prompt] OUT answer_len=%d", len(answer))
    return answer
