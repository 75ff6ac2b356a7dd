from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from src.integrations.assets import AssetManager, UploadedAsset
from src.integrations.news import NewsItem, RecordStore
from src.main import app
from src.presentation.routers.news import get_news_service
from src.services.news import NewsService

URL_PREFIX = '/src/assets/news'
PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00' * 32


def make_upload(filename: str = 'photo.png', content_type: str | None = 'image/png', content: bytes = PNG_BYTES):
    return UploadedAsset(filename=filename, content_type=content_type, content=content)


def make_item(news_id: int, **overrides) -> NewsItem:
    fields = {
        'id': news_id,
        'title': f'Title {news_id}',
        'date': '2024-05-01',
        'description': f'Description {news_id}',
        'image': f'{URL_PREFIX}/news-{news_id}.png',
        'fullText': f'Full text {news_id}',
    }
    fields.update(overrides)
    return NewsItem(**fields)


@pytest.fixture()
def store(tmp_path) -> RecordStore:
    return RecordStore(tmp_path / 'config' / 'newsConfig.ts')


@pytest.fixture()
def assets(tmp_path) -> AssetManager:
    manager = AssetManager(tmp_path / 'assets', url_prefix=URL_PREFIX, max_size=1024)
    manager.ensure_directory()
    return manager


@pytest.fixture()
def service(store, assets) -> NewsService:
    return NewsService(store=store, assets=assets, max_media_files=3)


@pytest.fixture()
def client(service):
    app.dependency_overrides[get_news_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
