from fastapi import APIRouter, Depends, File, Form, UploadFile

from src.core.config import env_config
from src.core.exceptions import ValidationError
from src.core.logger import get_logger
from src.integrations.assets import AssetManager, UploadedAsset
from src.integrations.news import NewsCreated, NewsDeleted, RecordStore
from src.services.news import NewsService

logger = get_logger(__name__)

router = APIRouter(prefix='/news', tags=['news'])

_news_service: NewsService | None = None


def get_news_service() -> NewsService:
    """Dependency for getting NewsService."""
    global _news_service # noqa
    if _news_service is None:
        _news_service = NewsService(
            store=RecordStore(env_config.NEWS_STORE_PATH, strict=env_config.STRICT_STORE_PARSING),
            assets=AssetManager(
                env_config.NEWS_ASSETS_DIR,
                url_prefix=env_config.NEWS_ASSETS_URL_PREFIX,
                max_size=env_config.MAX_UPLOAD_SIZE,
            ),
            max_media_files=env_config.MAX_MEDIA_FILES,
        )
        logger.info('NewsService initialized')
    return _news_service


async def _to_asset(upload: UploadFile | None) -> UploadedAsset | None:
    """Buffer an upload. Empty file fields count as missing."""
    if upload is None or not upload.filename:
        return None
    try:
        content = await upload.read()
    finally:
        await upload.close()
    return UploadedAsset(filename=upload.filename, content_type=upload.content_type, content=content)


@router.get('')
async def get_news(service: NewsService = Depends(get_news_service)):
    """Get all news items. `media` is omitted for items without secondary images."""
    news = await service.list_news()
    return [item.model_dump(exclude_none=True) for item in news]


@router.post('')
async def create_news(
    title: str | None = Form(None),
    description: str | None = Form(None),
    full_text: str | None = Form(None, alias='fullText'),
    image: UploadFile | None = File(None),
    media: list[UploadFile] | None = File(None),
    service: NewsService = Depends(get_news_service),
):
    """
    Create a news item.

    - **title**, **description**, **fullText**: required text fields
    - **image**: main image, required
    - **media**: up to 20 secondary images
    """
    main_image = await _to_asset(image)
    media_assets = []
    for upload in media or []:
        asset = await _to_asset(upload)
        if asset:
            media_assets.append(asset)

    news_item = await service.create(
        title=title,
        description=description,
        full_text=full_text,
        image=main_image,
        media=media_assets,
    )

    response = NewsCreated(news=news_item, message='News item added successfully')
    return response.model_dump(exclude_none=True)


@router.delete('/{news_id}')
async def delete_news(news_id: str, service: NewsService = Depends(get_news_service)):
    """
    Delete a news item with its images.

    - **news_id**: integer id of the news item
    """
    try:
        parsed_id = int(news_id)
    except ValueError:
        raise ValidationError('Invalid news id')

    await service.delete(parsed_id)
    return NewsDeleted(message='News item deleted successfully').model_dump()
