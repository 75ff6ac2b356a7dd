"""News management services."""

from src.services.news.news_service import NewsService

__all__ = [
    'NewsService',
]
