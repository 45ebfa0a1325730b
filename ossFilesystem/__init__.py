"""OSS文件系统模块

将阿里云OSS存储桶适配为层级文件系统接口
"""

from .interface import FilesystemAdapter, Visibility, CanOverwriteFiles
from .errors import handle_request, is_file_not_found
from .adapter import AliyunOssAdapter
from .oss_client import build_oss_client, create_adapter, get_filesystem

__all__ = [
    'FilesystemAdapter',
    'Visibility',
    'CanOverwriteFiles',
    'handle_request',
    'is_file_not_found',
    'AliyunOssAdapter',
    'build_oss_client',
    'create_adapter',
    'get_filesystem'
]
