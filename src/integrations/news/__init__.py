from src.integrations.news.models import NewsItem, NewsCreated, NewsDeleted
from src.integrations.news.store import RecordStore

__all__ = [
    'NewsCreated',
    'NewsDeleted',
    'NewsItem',
    'RecordStore',
]
