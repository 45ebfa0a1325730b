"""
文件系统适配器抽象接口

定义文件系统抽象的方法集合，任何对象存储实现（阿里云OSS、内存实现等）
都应实现该接口，使业务代码可以像操作层级文件系统一样操作对象存储。
"""

import enum
import io
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Dict, List, Mapping, Optional, Union

FileInfo = Dict[str, Any]
Config = Optional[Mapping[str, Any]]


class Visibility(str, enum.Enum):
    """文件可见性（公共读/私有）"""
    PUBLIC = "public"
    PRIVATE = "private"


class CanOverwriteFiles:
    """标记接口：write 可直接覆盖已存在的文件，无需先删除"""


class FilesystemAdapter(ABC):
    """
    文件系统适配器抽象基类

    路径均为以 "/" 分隔的逻辑路径；未找到的对象以 False/None 表示而不是抛出异常，
    具体约定见各方法说明。
    """

    @abstractmethod
    def has(self, path: str) -> bool:
        """检查文件是否存在"""

    @abstractmethod
    def read(self, path: str) -> Optional[FileInfo]:
        """读取文件内容，不存在时返回 None"""

    @abstractmethod
    def list_contents(self, directory: str = '', recursive: bool = False) -> List[FileInfo]:
        """列出目录内容"""

    @abstractmethod
    def get_metadata(self, path: str) -> Optional[FileInfo]:
        """获取文件元数据，不存在时返回 None"""

    def get_size(self, path: str) -> Optional[FileInfo]:
        """获取文件大小"""
        return self.get_metadata(path)

    def get_mimetype(self, path: str) -> Optional[FileInfo]:
        """获取文件MIME类型"""
        return self.get_metadata(path)

    def get_timestamp(self, path: str) -> Optional[FileInfo]:
        """获取文件最后修改时间"""
        return self.get_metadata(path)

    @abstractmethod
    def write(self, path: str, contents: Union[bytes, str], config: Config = None) -> FileInfo:
        """写入新文件"""

    @abstractmethod
    def update(self, path: str, contents: Union[bytes, str], config: Config = None) -> FileInfo:
        """更新文件"""

    @abstractmethod
    def rename(self, path: str, newpath: str) -> bool:
        """重命名文件"""

    @abstractmethod
    def copy(self, path: str, newpath: str) -> bool:
        """复制文件"""

    @abstractmethod
    def delete(self, path: str) -> bool:
        """删除文件"""

    @abstractmethod
    def delete_dir(self, dirname: str) -> bool:
        """删除目录"""

    @abstractmethod
    def create_dir(self, dirname: str, config: Config = None) -> Union[FileInfo, bool]:
        """创建目录，失败时返回 False"""

    @abstractmethod
    def set_visibility(self, path: str, visibility: Union[Visibility, str]) -> Union[FileInfo, bool]:
        """设置文件可见性，失败时返回 False"""

    @abstractmethod
    def get_visibility(self, path: str) -> Optional[FileInfo]:
        """获取文件可见性"""

    # 流式接口：基于 read/write 的通用实现

    def read_stream(self, path: str) -> Optional[FileInfo]:
        """以流的形式读取文件"""
        file = self.read(path)
        if not file:
            return None

        file['stream'] = io.BytesIO(file.pop('contents'))
        return file

    def write_stream(self, path: str, resource: BinaryIO, config: Config = None) -> FileInfo:
        """从流写入新文件"""
        return self.write(path, resource.read(), config)

    def update_stream(self, path: str, resource: BinaryIO, config: Config = None) -> FileInfo:
        """从流更新文件"""
        return self.update(path, resource.read(), config)
