"""Check a user request against the extracted tables with the LLM."""
from __future__ import annotations

import logging

from src.dataset.store import DatasetStore
from src.generation.llm_client import LLMClient
from src.generation.prompts import VALIDATION_SYSTEM_PROMPT, build_validation_prompt
from src.shared.errors import DatasetNotFoundError
from src.shared.models.generation import ValidationOutcome

logger = logging.getLogger(__name__)


def parse_verdict(text: str) -> ValidationOutcome:
    """Interpret a ``VALID: ...`` / ``INVALID: ...`` completion.

    Anything that does not start with ``VALID`` counts as invalid.
    """
    message = text.strip()
    return ValidationOutcome(valid=message.upper().startswith("VALID"), message=message)


class RequestValidator:
    """Asks the LLM whether the dataset can serve a user request."""

    def __init__(self, llm: LLMClient, model: str | None = None) -> None:
        self.llm = llm
        self.model = model

    async def validate(self, store: DatasetStore, query: str) -> ValidationOutcome:
        """Return the verdict for *query*.

        Raises:
            DatasetNotFoundError: If the dataset is missing or has no tables.
            LLMError: If the completion request fails.
        """
        summaries = store.summarize()
        if not summaries:
            raise DatasetNotFoundError("Dataset has no tables - run extract first")
        logger.info(
            "Validating request against tables: %s",
            ", ".join(s.table_name for s in summaries),
        )
        response = await self.llm.complete(
            VALIDATION_SYSTEM_PROMPT,
            build_validation_prompt(query, summaries),
            model=self.model or self.llm.config.validation_model,
        )
        outcome = parse_verdict(response)
        logger.info("Validation result: %s", outcome.message)
        return outcome
