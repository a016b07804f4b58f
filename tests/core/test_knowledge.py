"""Tests for the static knowledge base catalog."""

from __future__ import annotations

import dataclasses

import pytest

from itsm_tools.knowledge import ARTICLES, KnowledgeBase


@pytest.fixture
def kb() -> KnowledgeBase:
    return KnowledgeBase()


class TestCatalog:
    def test_five_articles(self, kb: KnowledgeBase) -> None:
        assert len(kb) == 5
        assert [a.id for a in ARTICLES] == ["KB-001", "KB-002", "KB-003", "KB-004", "KB-005"]

    def test_articles_are_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            ARTICLES[0].title = "changed"  # type: ignore[misc]


class TestSearch:
    def test_case_insensitive_title_match(self, kb: KnowledgeBase) -> None:
        assert [a.id for a in kb.search("VPN")] == ["KB-004"]
        assert [a.id for a in kb.search("vpn")] == ["KB-004"]

    def test_matches_summary(self, kb: KnowledgeBase) -> None:
        assert [a.id for a in kb.search("android")] == ["KB-003"]

    def test_results_in_catalog_order(self, kb: KnowledgeBase) -> None:
        assert [a.id for a in kb.search("common")] == ["KB-002", "KB-004"]

    def test_limit(self, kb: KnowledgeBase) -> None:
        assert len(kb.search("", limit=2)) == 2
        assert len(kb.search("")) == 5
        assert kb.search("common", limit=1)[0].id == "KB-002"

    def test_no_match_is_empty(self, kb: KnowledgeBase) -> None:
        assert kb.search("kubernetes") == []

    def test_to_dict(self, kb: KnowledgeBase) -> None:
        assert kb.search("printer")[0].to_dict() == {
            "id": "KB-005",
            "title": "Printer setup guide",
            "summary": "How to install and configure network printers",
            "url": "https://example.com/kb/printer-setup",
        }
