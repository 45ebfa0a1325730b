from typing import Any, Mapping, Optional

try:
    import alibabacloud_oss_v2 as oss
except ImportError:
    raise ImportError("请安装 alibabacloud-oss-v2 SDK: pip install alibabacloud-oss-v2")

from config import OSSSettings, get_oss_settings
from services.logger import get_logger

from .adapter import AliyunOssAdapter

# 获取OSS专用日志器
logger = get_logger("oss_filesystem.client")


def build_credentials_provider(oss_settings: OSSSettings):
    """
    创建凭证提供者

    配置了访问密钥时使用静态凭证，否则从 OSS_ACCESS_KEY_ID /
    OSS_ACCESS_KEY_SECRET 环境变量中加载。
    """
    if oss_settings.access_key_id and oss_settings.access_key_secret:
        logger.debug("使用静态凭证提供者")
        return oss.credentials.StaticCredentialsProvider(
            access_key_id=oss_settings.access_key_id,
            access_key_secret=oss_settings.access_key_secret,
            security_token=oss_settings.security_token
        )

    logger.debug("使用环境变量凭证提供者")
    return oss.credentials.EnvironmentVariableCredentialsProvider()


def build_oss_client(oss_settings: Optional[OSSSettings] = None) -> "oss.Client":
    """
    根据配置创建OSS客户端

    Args:
        oss_settings: OSS配置，默认使用全局配置

    Returns:
        alibabacloud_oss_v2.Client 实例
    """
    oss_settings = oss_settings or get_oss_settings()
    logger.debug(f"开始初始化OSS客户端 - 区域: {oss_settings.region}")

    try:
        # 加载SDK的默认配置
        cfg = oss.config.load_default()
        cfg.credentials_provider = build_credentials_provider(oss_settings)
        cfg.region = oss_settings.region

        if oss_settings.endpoint:
            cfg.endpoint = oss_settings.endpoint
            logger.debug(f"已设置自定义端点: {oss_settings.endpoint}")
        if oss_settings.connect_timeout is not None:
            cfg.connect_timeout = oss_settings.connect_timeout
        if oss_settings.readwrite_timeout is not None:
            cfg.readwrite_timeout = oss_settings.readwrite_timeout
        if oss_settings.retry_max_attempts is not None:
            cfg.retry_max_attempts = oss_settings.retry_max_attempts

        client = oss.Client(cfg)

        logger.info(f"✅ OSS客户端初始化成功 - 区域: {oss_settings.region}, 端点: {oss_settings.endpoint or '默认'}")
        return client

    except Exception as e:
        logger.error(f"❌ OSS客户端初始化失败: {str(e)}")
        logger.debug(f"初始化失败详细信息: {type(e).__name__}: {str(e)}")
        raise


def create_adapter(oss_settings: Optional[OSSSettings] = None,
                   client: Any = None,
                   options: Optional[Mapping[str, Any]] = None) -> AliyunOssAdapter:
    """
    创建OSS文件系统适配器

    Args:
        oss_settings: OSS配置，默认使用全局配置
        client: 已创建的客户端，为None时根据配置创建
        options: 透传给客户端调用的操作参数

    Returns:
        AliyunOssAdapter 实例
    """
    oss_settings = oss_settings or get_oss_settings()

    if not oss_settings.bucket:
        raise ValueError("OSS存储桶未配置，请设置OSS_BUCKET环境变量")

    if client is None:
        client = build_oss_client(oss_settings)

    return AliyunOssAdapter(
        client=client,
        bucket=oss_settings.bucket,
        prefix=oss_settings.prefix,
        options=options
    )


# 全局文件系统实例
_filesystem = None

def get_filesystem() -> AliyunOssAdapter:
    """获取全局OSS文件系统实例"""
    global _filesystem
    if _filesystem is None:
        _filesystem = create_adapter()
    return _filesystem
