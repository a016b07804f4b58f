"""Static knowledge base catalog. Read-only; there is no way to add articles."""

from __future__ import annotations

from dataclasses import dataclass

from itsm_tools.types.core import ArticleDict

DEFAULT_SEARCH_LIMIT = 5


@dataclass(frozen=True)
class KnowledgeArticle:
    id: str
    title: str
    summary: str
    url: str

    def matches(self, needle: str) -> bool:
        """Case-insensitive substring match on title or summary. *needle* must be lowercased."""
        return needle in self.title.lower() or needle in self.summary.lower()

    def to_dict(self) -> ArticleDict:
        return {"id": self.id, "title": self.title, "summary": self.summary, "url": self.url}


ARTICLES: tuple[KnowledgeArticle, ...] = (
    KnowledgeArticle(
        id="KB-001",
        title="How to reset your password",
        summary="Step-by-step guide to reset your password",
        url="https://example.com/kb/password-reset",
    ),
    KnowledgeArticle(
        id="KB-002",
        title="Common login issues",
        summary="Troubleshooting common login problems",
        url="https://example.com/kb/login-issues",
    ),
    KnowledgeArticle(
        id="KB-003",
        title="Setting up email on mobile devices",
        summary="How to configure email on iOS and Android",
        url="https://example.com/kb/email-setup",
    ),
    KnowledgeArticle(
        id="KB-004",
        title="VPN connection troubleshooting",
        summary="Fixing common VPN connection problems",
        url="https://example.com/kb/vpn-issues",
    ),
    KnowledgeArticle(
        id="KB-005",
        title="Printer setup guide",
        summary="How to install and configure network printers",
        url="https://example.com/kb/printer-setup",
    ),
)


class KnowledgeBase:
    def __init__(self, articles: tuple[KnowledgeArticle, ...] = ARTICLES) -> None:
        self._articles = articles

    def __len__(self) -> int:
        return len(self._articles)

    def search(self, query: str, *, limit: int = DEFAULT_SEARCH_LIMIT) -> list[KnowledgeArticle]:
        """Return the first *limit* matches in catalog order (no ranking)."""
        needle = query.lower()
        return [a for a in self._articles if a.matches(needle)][:limit]
