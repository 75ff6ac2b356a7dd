from src.integrations.assets.manager import AssetManager, UploadedAsset

__all__ = [
    'AssetManager',
    'UploadedAsset',
]
