"""
Shared test fixtures.

Provides: settings with small chunk sizes, a lesson content tree on disk,
a counting document source and a fake completion orchestrator.
"""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from app.core.config import Settings
from app.services.rag.models import Document


class CountingDocumentSource:
    """Document source spy: records how many times the pipeline loaded lessons."""

    def __init__(self, documents: list[Document]):
        self.documents = documents
        self.load_calls = 0

    async def load(self) -> list[Document]:
        self.load_calls += 1
        return list(self.documents)


@pytest.fixture
def settings() -> Settings:
    """Settings with small chunks so tests can reason about boundaries."""
    return Settings(
        _env_file=None,
        openai_api_key="test-key",
        chat_model="gpt-4.1-mini",
        chunk_size=200,
        chunk_overlap=20,
        retrieval_top_k=3,
        content_dir="unused",
    )


@pytest.fixture
def lesson_documents() -> list[Document]:
    """Two small lessons on different measurement topics."""
    return [
        Document(
            identifier="physics/measurements/vectors/content.mdx",
            text=(
                "A vector quantity has magnitude and direction. "
                "Displacement, velocity and force are vectors."
            ),
        ),
        Document(
            identifier="physics/measurements/prefixes/content.mdx",
            text="The prefix kilo means 10^3 and the prefix milli means 10^-3.",
        ),
    ]


@pytest.fixture
def document_source(lesson_documents: list[Document]) -> CountingDocumentSource:
    return CountingDocumentSource(lesson_documents)


@pytest.fixture
def mock_orchestrator() -> AsyncMock:
    """Completion orchestrator that answers with a fixed string."""
    orchestrator = AsyncMock()
    orchestrator.complete.return_value = "A vector has magnitude and direction."
    return orchestrator


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    """A lesson tree shaped like the site's app/physics folders."""
    root = tmp_path / "content"
    (root / "physics" / "measurements" / "b_prefixes").mkdir(parents=True)
    (root / "physics" / "measurements" / "a_outcomes").mkdir(parents=True)

    (root / "physics" / "measurements" / "b_prefixes" / "content.mdx").write_text(
        'import { BaseUnitTable } from "@/components/table";\n\n'
        "# Prefixes\n\n"
        "<BaseUnitTable />\n\n"
        "The prefix kilo means $10^3$.\n",
        encoding="utf-8",
    )
    (root / "physics" / "measurements" / "a_outcomes" / "content.md").write_text(
        "# Learning outcomes\n\nRecall the SI base quantities.\n",
        encoding="utf-8",
    )
    (root / "physics" / "measurements" / "notes.txt").write_text(
        "not a lesson", encoding="utf-8"
    )
    return root
