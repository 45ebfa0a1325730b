"""
项目配置文件
"""
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class OSSSettings(BaseSettings):
    """阿里云OSS配置"""
    access_key_id: Optional[str] = Field(default=None, description="访问密钥ID")
    access_key_secret: Optional[str] = Field(default=None, description="访问密钥Secret")
    security_token: Optional[str] = Field(default=None, description="STS临时凭证令牌")
    region: str = Field(default="cn-guangzhou", description="区域")
    endpoint: Optional[str] = Field(default=None, description="自定义端点")
    bucket: Optional[str] = Field(default=None, description="存储桶名称")
    prefix: str = Field(default="", description="路径前缀")
    connect_timeout: Optional[int] = Field(default=None, description="连接超时时间（秒）")
    readwrite_timeout: Optional[int] = Field(default=None, description="读写超时时间（秒）")
    retry_max_attempts: Optional[int] = Field(default=None, description="最大重试次数")

    model_config = SettingsConfigDict(
        env_prefix="OSS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

class LoggingSettings(BaseSettings):
    """日志配置"""
    console_level: str = Field(default="INFO", validation_alias="CONSOLE_LOG_LEVEL", description="控制台日志级别")
    file_level: str = Field(default="DEBUG", validation_alias="FILE_LOG_LEVEL", description="文件日志级别")
    log_dir: str = Field(default="logs", validation_alias="LOG_DIR", description="日志目录")
    log_to_file: bool = Field(default=False, validation_alias="LOG_TO_FILE", description="是否写入日志文件")
    max_file_size: int = Field(default=100, validation_alias="LOG_MAX_FILE_SIZE", description="日志文件最大大小（MB）")
    backup_count: int = Field(default=10, validation_alias="LOG_BACKUP_COUNT", description="日志备份数量")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore"
    )

class AppSettings(BaseSettings):
    """应用配置"""
    app_name: str = Field(default="OSS Filesystem", validation_alias="APP_NAME", description="应用名称")
    debug: bool = Field(default=False, validation_alias="DEBUG", description="调试模式")

    # 子配置
    oss: OSSSettings = Field(default_factory=OSSSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore"
    )

# 全局配置实例
settings = AppSettings()

def get_settings() -> AppSettings:
    """获取配置实例"""
    return settings

def get_oss_settings() -> OSSSettings:
    """获取OSS配置"""
    return settings.oss

def get_logging_settings() -> LoggingSettings:
    """获取日志配置"""
    return settings.logging

def is_debug_mode() -> bool:
    """是否为调试模式"""
    return settings.debug
