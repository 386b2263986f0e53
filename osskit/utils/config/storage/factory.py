import logging
from typing import Optional

from ..oss import OssConfig
from .aliyun import AliyunStorage

logger = logging.getLogger(__name__)

#-----------------------------------------------------------------------------

class StorageFactory:
    """Builds and caches the process-wide storage facade"""

    _instance: Optional[AliyunStorage] = None

    #-----------------------------------------------------

    @classmethod
    def create_storage(cls, config: Optional[OssConfig] = None) -> AliyunStorage:
        """
        Create storage instance based on configuration

        Args:
            config: OSS settings. Read from the global Config when None.

        Returns:
            Storage instance
        """
        if cls._instance is not None and config is None:
            logger.info("Reusing cached storage instance")
            return cls._instance

        if config is None:
            from ..config import global_config

            global_cfg = global_config()
            config = global_cfg.get_oss() if global_cfg else OssConfig()

        instance = AliyunStorage(config=config)
        cls._instance = instance

        logger.info(f"Storage instance created successfully: bucket={config.bucket}")

        return instance

    #-----------------------------------------------------

    @classmethod
    def get_instance(cls) -> Optional[AliyunStorage]:
        """Get current storage instance without creating new one"""
        return cls._instance

    #-----------------------------------------------------

    @classmethod
    def reset(cls):
        """Reset factory state (useful for testing)"""
        cls._instance = None
        logger.info("Storage factory reset")

#-----------------------------------------------------------------------------

def get_storage_client() -> AliyunStorage:
    """
    Convenience function to get storage client

    Returns:
        Storage instance
    """
    instance = StorageFactory.get_instance()
    if instance is None:
        instance = StorageFactory.create_storage()
    return instance

#-----------------------------------------------------------------------------
