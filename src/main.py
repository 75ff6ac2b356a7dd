from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from src.core.config import env_config, app_config
from src.core.exceptions import NewsError
from src.core.logger import get_logger
from src.presentation.middlewares.logging import RequestLoggingMiddleware
from src.presentation.routers import news

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(
    _app: FastAPI,
) -> AsyncGenerator[None]:
    service = news.get_news_service()
    service.assets.ensure_directory()
    service.store.ensure_exists()

    base_url: str = f'http://{env_config.APP_HOST}:{env_config.APP_PORT}'
    logger.info(f'App started on {base_url}')
    logger.info(f'See Swagger for more info: {base_url}/docs')
    yield
    logger.warning('Stopping app...')


app = FastAPI(title=env_config.APP_NAME, debug=env_config.DEBUG, lifespan=lifespan)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=app_config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers and static assets
app.include_router(news.router)
app.mount(
    env_config.NEWS_ASSETS_URL_PREFIX,
    StaticFiles(directory=env_config.NEWS_ASSETS_DIR, check_dir=False),
    name='news-assets',
)


@app.exception_handler(NewsError)
async def news_error_handler(request: Request, exc: NewsError):
    if exc.status_code >= 500:
        logger.error(f'{request.method} {request.url.path} failed: {exc.message}')
    return JSONResponse(status_code=exc.status_code, content={'success': False, 'error': exc.message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f'Unhandled error: {exc}', exc_info=True)
    return JSONResponse(status_code=500, content={'success': False, 'error': 'Internal server error'})


@app.get('/health')
async def health():
    return {'status': 'ok'}


if __name__ == '__main__':
    import uvicorn

    uvicorn.run(app, host=env_config.APP_HOST, port=env_config.APP_PORT, log_level=50)
