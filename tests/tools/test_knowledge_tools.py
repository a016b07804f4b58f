"""Contract tests for search_knowledge_base."""

from __future__ import annotations

from itsm_tools.dispatcher import Dispatcher


class TestSearchKnowledgeBase:
    async def test_matches(self, dispatcher: Dispatcher) -> None:
        result = await dispatcher.call("search_knowledge_base", {"query": "password"})
        assert result["success"] is True
        assert result["total"] == 1
        assert result["articles"][0]["id"] == "KB-001"
        assert set(result["articles"][0]) == {"id", "title", "summary", "url"}

    async def test_empty_result_is_success(self, dispatcher: Dispatcher) -> None:
        result = await dispatcher.call("search_knowledge_base", {"query": "mainframe"})
        assert result == {"success": True, "articles": [], "total": 0}

    async def test_limit(self, dispatcher: Dispatcher) -> None:
        result = await dispatcher.call("search_knowledge_base", {"query": "", "limit": 3})
        assert [a["id"] for a in result["articles"]] == ["KB-001", "KB-002", "KB-003"]
        assert result["total"] == 3

    async def test_default_limit_is_five(self, dispatcher: Dispatcher) -> None:
        result = await dispatcher.call("search_knowledge_base", {"query": "o"})
        assert result["total"] <= 5

    async def test_query_required(self, dispatcher: Dispatcher) -> None:
        result = await dispatcher.call("search_knowledge_base", {})
        assert result == {"success": False, "error": "query is required"}

    async def test_query_must_be_string(self, dispatcher: Dispatcher) -> None:
        result = await dispatcher.call("search_knowledge_base", {"query": ["vpn"]})
        assert result == {"success": False, "error": "query must be a string"}
