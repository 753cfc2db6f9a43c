"""Fixtures for the LLM-backed generation steps."""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.shared.config import LLMConfig

SCHEMA_RESPONSE = """\
Here is the schema you asked for:

```typescript
import { pgTable, uuid, varchar, integer, float } from 'drizzle-orm/pg-core';

export const songs = pgTable('songs', {
  id: uuid('id').primaryKey().defaultRandom(),
  title: varchar('title').notNull(),
  plays: number('plays'),
  rating: float('rating'),
});
```

Let me know if you need anything else.
"""


@pytest.fixture
def llm_config() -> LLMConfig:
    return LLMConfig(
        api_key="sk-test",
        base_url="https://llm.example.com/v1/",
        schema_model="schema-model",
        validation_model="check-model",
    )


@pytest.fixture
def fake_llm(llm_config: LLMConfig) -> MagicMock:
    """Stand-in for LLMClient with a canned schema completion."""
    llm = MagicMock()
    llm.config = llm_config
    llm.complete = AsyncMock(return_value=SCHEMA_RESPONSE)
    return llm
