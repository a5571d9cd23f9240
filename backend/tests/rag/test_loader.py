import logging
import os
from pathlib import Path

import pytest

from app.core.exceptions import LoadError
from app.services.rag import loader as loader_module
from app.services.rag.loader import (
    LessonDocumentCache,
    LessonLoader,
    clean_lesson_text,
    read_lesson_documents,
)


class TestCleanLessonText:
    def test_strips_imports_and_component_tags(self) -> None:
        raw = (
            'import PracticeMCQ_Homogenity from "@/components/x";\n'
            "export const meta = { title: 'Units' };\n"
            "# Homogeneity\n\n"
            "<PracticeMCQ_Homogenity />\n\n"
            '<BaseUnitTable caption="SI units" />\n'
            "Each term must have the same base units: $s = ut$.\n"
        )

        cleaned = clean_lesson_text(raw)

        assert "import" not in cleaned
        assert "export" not in cleaned
        assert "<" not in cleaned
        assert cleaned.startswith("# Homogeneity")
        assert "$s = ut$" in cleaned

    def test_keeps_inline_comparisons(self) -> None:
        assert clean_lesson_text("If x < 5 then y > 2") == "If x < 5 then y > 2"


class TestReadLessonDocuments:
    def test_loads_mdx_and_md_recursively_in_path_order(self, content_dir: Path) -> None:
        documents = read_lesson_documents(content_dir)

        assert [d.identifier for d in documents] == [
            "physics/measurements/a_outcomes/content.md",
            "physics/measurements/b_prefixes/content.mdx",
        ]

    def test_document_text_is_cleaned(self, content_dir: Path) -> None:
        documents = read_lesson_documents(content_dir)
        prefixes = documents[1]

        assert "BaseUnitTable" not in prefixes.text
        assert "The prefix kilo means $10^3$." in prefixes.text

    def test_missing_directory_raises_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(LoadError, match="not found"):
            read_lesson_documents(tmp_path / "missing")

    def test_empty_directory_returns_no_documents(self, tmp_path: Path) -> None:
        assert read_lesson_documents(tmp_path) == []

    def test_unreadable_file_is_skipped_with_warning(
        self, content_dir: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        broken = content_dir / "physics" / "broken.mdx"
        broken.write_bytes(b"\xff\xfe\xfa not utf-8")

        with caplog.at_level(logging.WARNING):
            documents = read_lesson_documents(content_dir)

        assert "physics/broken.mdx" not in [d.identifier for d in documents]
        assert len(documents) == 2
        assert "physics/broken.mdx" in caplog.text

    def test_all_files_unreadable_raises_load_error(self, tmp_path: Path) -> None:
        (tmp_path / "broken.mdx").write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(LoadError, match="Every lesson file failed"):
            read_lesson_documents(tmp_path)


class TestLessonLoader:
    @pytest.mark.asyncio
    async def test_load_reads_from_disk_each_time(self, content_dir: Path) -> None:
        loader = LessonLoader(content_dir)

        first = await loader.load()
        (content_dir / "new.md").write_text("# New lesson", encoding="utf-8")
        second = await loader.load()

        assert len(second) == len(first) + 1


class TestLessonDocumentCache:
    @pytest.mark.asyncio
    async def test_serves_snapshot_within_ttl(self, content_dir: Path) -> None:
        cache = LessonDocumentCache(LessonLoader(content_dir), ttl_seconds=3600)

        first = await cache.load()
        (content_dir / "new.md").write_text("# New lesson", encoding="utf-8")
        second = await cache.load()

        assert second == first

    @pytest.mark.asyncio
    async def test_refreshes_when_files_change_after_ttl(self, content_dir: Path) -> None:
        cache = LessonDocumentCache(LessonLoader(content_dir), ttl_seconds=0)

        first = await cache.load()
        (content_dir / "new.md").write_text("# New lesson", encoding="utf-8")
        second = await cache.load()

        assert len(second) == len(first) + 1

    @pytest.mark.asyncio
    async def test_unchanged_files_are_not_reread(self, content_dir: Path, monkeypatch) -> None:
        cache = LessonDocumentCache(LessonLoader(content_dir), ttl_seconds=0)
        await cache.load()

        calls = []
        original = loader_module.read_lesson_documents

        def spy(path):
            calls.append(path)
            return original(path)

        monkeypatch.setattr(loader_module, "read_lesson_documents", spy)
        await cache.load()

        assert calls == []

    @pytest.mark.asyncio
    async def test_invalidate_forces_reload(self, content_dir: Path) -> None:
        cache = LessonDocumentCache(LessonLoader(content_dir), ttl_seconds=3600)

        await cache.load()
        lesson = content_dir / "physics" / "measurements" / "a_outcomes" / "content.md"
        lesson.write_text("# Rewritten outcomes", encoding="utf-8")
        cache.invalidate()
        documents = await cache.load()

        assert documents[0].text == "# Rewritten outcomes"

    @pytest.mark.asyncio
    async def test_callers_cannot_mutate_snapshot(self, content_dir: Path) -> None:
        cache = LessonDocumentCache(LessonLoader(content_dir), ttl_seconds=3600)

        documents = await cache.load()
        documents.clear()

        assert len(await cache.load()) == 2


class TestGetDocumentSource:
    def test_returns_plain_loader_when_cache_disabled(self, monkeypatch, settings) -> None:
        settings.content_cache_enabled = False
        monkeypatch.setattr(loader_module, "get_settings", lambda: settings)

        assert isinstance(loader_module.get_document_source(), LessonLoader)

    def test_returns_shared_cache_when_enabled(self, monkeypatch, settings) -> None:
        settings.content_cache_enabled = True
        monkeypatch.setattr(loader_module, "get_settings", lambda: settings)
        monkeypatch.setattr(loader_module, "_lesson_cache", None)

        first = loader_module.get_document_source()
        second = loader_module.get_document_source()

        assert isinstance(first, LessonDocumentCache)
        assert first is second


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_permission_denied_file_is_skipped(content_dir: Path) -> None:
    if hasattr(os, "geteuid") and os.geteuid() == 0:
        pytest.skip("root can read files regardless of mode")
    locked = content_dir / "locked.mdx"
    locked.write_text("# Locked", encoding="utf-8")
    locked.chmod(0)
    try:
        documents = read_lesson_documents(content_dir)
    finally:
        locked.chmod(0o644)

    assert "locked.mdx" not in [d.identifier for d in documents]
