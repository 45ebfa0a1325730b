"""
阿里云OSS文件系统适配器

将 alibabacloud_oss_v2 客户端适配为 FilesystemAdapter 接口：
逻辑路径 <-> 对象键（加前缀），目录通过 "/" 结尾的占位对象和公共前缀模拟。
"""

from datetime import datetime
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

try:
    import alibabacloud_oss_v2 as oss
except ImportError:
    raise ImportError("请安装 alibabacloud-oss-v2 SDK: pip install alibabacloud-oss-v2")

from services.logger import get_logger, performance_logger

from .errors import handle_request
from .interface import CanOverwriteFiles, Config, FileInfo, FilesystemAdapter, Visibility

logger = get_logger("oss_filesystem.adapter")

DIRECTORY_SEPARATOR = '/'

# 单次列举的最大对象数量
LIST_MAX_KEYS = 1000

# 单次批量删除的最大对象数量（OSS限制）
DELETE_BATCH_SIZE = 1000

ACL_PUBLIC_READ = 'public-read'
ACL_PUBLIC_READ_WRITE = 'public-read-write'
ACL_PRIVATE = 'private'

VISIBILITY_ACLS = {
    Visibility.PUBLIC: ACL_PUBLIC_READ,
    Visibility.PRIVATE: ACL_PRIVATE,
}


def _to_timestamp(value: Any) -> Optional[int]:
    """将最后修改时间转换为Unix时间戳"""
    if value is None:
        return None
    if isinstance(value, datetime):
        return int(value.timestamp())
    if isinstance(value, (int, float)):
        return int(value)
    return None


def visibility_to_acl(visibility: Union[Visibility, str]) -> str:
    """可见性 -> OSS ACL"""
    try:
        visibility = Visibility(visibility)
    except ValueError:
        raise ValueError(f"不支持的可见性: {visibility}，仅支持 public 和 private") from None
    return VISIBILITY_ACLS[visibility]


def acl_to_visibility(acl: Optional[str]) -> Union[Visibility, str, None]:
    """OSS ACL -> 可见性，无法识别的ACL（如 default）原样返回"""
    if acl == ACL_PRIVATE:
        return Visibility.PRIVATE
    if acl in (ACL_PUBLIC_READ, ACL_PUBLIC_READ_WRITE):
        return Visibility.PUBLIC
    return acl


class AliyunOssAdapter(CanOverwriteFiles, FilesystemAdapter):
    """阿里云OSS文件系统适配器"""

    def __init__(self,
                 client: Any,
                 bucket: str,
                 prefix: str = '',
                 options: Optional[Mapping[str, Any]] = None):
        """
        初始化适配器（不发起任何请求）

        Args:
            client: alibabacloud_oss_v2.Client 实例
            bucket: 存储桶名称
            prefix: 路径前缀，所有对象键都会加上该前缀
            options: 透传给每次客户端调用的操作参数，例如 readwrite_timeout
        """
        if not bucket:
            raise ValueError("存储桶名称不能为空")

        self.client = client
        self.bucket = bucket
        self.prefix = prefix
        self.options = options

    @property
    def prefix(self) -> str:
        """路径前缀（非空时以 "/" 结尾）"""
        return self._prefix

    @prefix.setter
    def prefix(self, prefix: Optional[str]):
        prefix = (prefix or '').strip(DIRECTORY_SEPARATOR)
        self._prefix = prefix + DIRECTORY_SEPARATOR if prefix else ''

    @property
    def options(self) -> Dict[str, Any]:
        """客户端调用参数（副本）"""
        return dict(self._options)

    @options.setter
    def options(self, options: Optional[Mapping[str, Any]]):
        self._options = dict(options or {})

    def apply_prefix(self, path: str) -> str:
        """逻辑路径 -> 对象键"""
        return self._prefix + path.lstrip(DIRECTORY_SEPARATOR)

    def remove_prefix(self, key: str) -> str:
        """对象键 -> 逻辑路径"""
        if self._prefix and key.startswith(self._prefix):
            return key[len(self._prefix):]
        return key

    def has(self, path: str) -> bool:
        key = self.apply_prefix(path)
        logger.debug(f"检查对象是否存在 - 存储桶: {self.bucket}, 对象: {key}")

        def head() -> bool:
            self.client.head_object(
                oss.HeadObjectRequest(bucket=self.bucket, key=key),
                **self._options
            )
            return True

        return handle_request(head, default=False)

    def read(self, path: str) -> Optional[FileInfo]:
        key = self.apply_prefix(path)
        logger.debug(f"读取对象 - 存储桶: {self.bucket}, 对象: {key}")

        def get() -> FileInfo:
            result = self.client.get_object(
                oss.GetObjectRequest(bucket=self.bucket, key=key),
                **self._options
            )
            contents = b''
            if result.body is not None:
                with result.body as body_stream:
                    contents = body_stream.read()
            return self._transform_file(result, path, contents)

        return handle_request(get)

    def list_contents(self, directory: str = '', recursive: bool = False) -> List[FileInfo]:
        contents: List[FileInfo] = []
        pages = 0
        # 目录自身的占位对象不属于其内容
        own_key = self._list_query(directory, recursive).get('prefix')

        with performance_logger(logger, f"list_contents({directory or '/'})"):
            for page in self._list_pages(directory, recursive):
                pages += 1
                contents.extend(self._transform_contents(
                    [obj for obj in (page.contents or []) if obj.key != own_key]
                ))
                contents.extend(self._transform_directories(page.common_prefixes or []))

        logger.info(f"✅ 列出目录成功 - 存储桶: {self.bucket}, 目录: {directory or '/'}, "
                    f"递归: {recursive}, 条目数: {len(contents)}, 页数: {pages}")
        return contents

    def _list_query(self, directory: str, recursive: bool) -> Dict[str, Any]:
        """构建列举请求参数"""
        query: Dict[str, Any] = {'max_keys': LIST_MAX_KEYS}

        if directory:
            directory = directory.rstrip(DIRECTORY_SEPARATOR) + DIRECTORY_SEPARATOR

        prefix = self.apply_prefix(directory)
        if prefix:
            query['prefix'] = prefix

        if not recursive:
            query['delimiter'] = DIRECTORY_SEPARATOR

        return query

    def _list_pages(self, directory: str, recursive: bool) -> Iterator[Any]:
        """按 marker 逐页列举对象，直到服务端不再返回 next_marker"""
        query = self._list_query(directory, recursive)
        marker = None

        while True:
            request = oss.ListObjectsRequest(bucket=self.bucket, marker=marker, **query)
            logger.debug(f"发送ListObjects请求 - 存储桶: {self.bucket}, 参数: {query}, marker: {marker}")
            page = self.client.list_objects(request, **self._options)
            yield page

            marker = getattr(page, 'next_marker', None)
            if not marker:
                break

    def _transform_contents(self, objects: List[Any]) -> List[FileInfo]:
        contents = []

        for obj in objects:
            if obj.key.endswith(DIRECTORY_SEPARATOR):
                entry: FileInfo = {
                    'type': 'dir',
                    'path': self.remove_prefix(obj.key).rstrip(DIRECTORY_SEPARATOR),
                }
            else:
                entry = {
                    'type': 'file',
                    'path': self.remove_prefix(obj.key),
                }
                if getattr(obj, 'size', None) is not None:
                    entry['size'] = int(obj.size)

            timestamp = _to_timestamp(getattr(obj, 'last_modified', None))
            if timestamp is not None:
                entry['timestamp'] = timestamp

            contents.append(entry)

        return contents

    def _transform_directories(self, common_prefixes: List[Any]) -> List[FileInfo]:
        return [
            {
                'type': 'dir',
                'path': self.remove_prefix(common_prefix.prefix).rstrip(DIRECTORY_SEPARATOR),
            }
            for common_prefix in common_prefixes
        ]

    def get_metadata(self, path: str) -> Optional[FileInfo]:
        key = self.apply_prefix(path)
        logger.debug(f"获取对象元数据 - 存储桶: {self.bucket}, 对象: {key}")

        def head() -> FileInfo:
            result = self.client.head_object(
                oss.HeadObjectRequest(bucket=self.bucket, key=key),
                **self._options
            )
            return self._transform_file(result, path)

        return handle_request(head)

    def _transform_file(self, result: Any, path: str, contents: Optional[bytes] = None) -> FileInfo:
        file: FileInfo = {
            'type': 'file',
            'path': path,
        }

        if contents is not None:
            file['contents'] = contents

        timestamp = _to_timestamp(getattr(result, 'last_modified', None))
        if timestamp is not None:
            file['timestamp'] = timestamp

        content_length = getattr(result, 'content_length', None)
        if content_length is not None:
            file['size'] = int(content_length)

        content_type = getattr(result, 'content_type', None)
        if content_type:
            file['mimetype'] = content_type

        return file

    def _upload_fields(self, config: Config) -> Dict[str, Any]:
        """从写入配置中提取 PutObjectRequest 的请求头字段"""
        fields: Dict[str, Any] = {}
        if not config:
            return fields

        if 'ContentType' in config:
            fields['content_type'] = config.get('ContentType')

        if config.get('visibility'):
            fields['acl'] = visibility_to_acl(config.get('visibility'))

        return fields

    def write(self, path: str, contents: Union[bytes, str], config: Config = None) -> FileInfo:
        key = self.apply_prefix(path).rstrip(DIRECTORY_SEPARATOR)

        if isinstance(contents, str):
            contents = contents.encode('utf-8')

        fields = self._upload_fields(config)
        logger.debug(f"写入对象 - 存储桶: {self.bucket}, 对象: {key}, 大小: {len(contents)}字节")

        self.client.put_object(
            oss.PutObjectRequest(bucket=self.bucket, key=key, body=contents, **fields),
            **self._options
        )
        logger.info(f"✅ 写入对象成功 - 存储桶: {self.bucket}, 对象: {key}")

        file: FileInfo = {
            'type': 'file',
            'path': path,
            'size': len(contents),
        }
        if fields.get('content_type'):
            file['mimetype'] = fields['content_type']
        return file

    def update(self, path: str, contents: Union[bytes, str], config: Config = None) -> FileInfo:
        return self.write(path, contents, config)

    def rename(self, path: str, newpath: str) -> bool:
        # 先复制再删除，非原子操作：删除失败时两个对象同时存在
        self.copy(path, newpath)
        self.delete(path)

        return True

    def copy(self, path: str, newpath: str) -> bool:
        source_key = self.apply_prefix(path)
        key = self.apply_prefix(newpath)
        logger.debug(f"复制对象 - 存储桶: {self.bucket}, {source_key} -> {key}")

        self.client.copy_object(
            oss.CopyObjectRequest(
                bucket=self.bucket,
                key=key,
                source_bucket=self.bucket,
                source_key=source_key
            ),
            **self._options
        )

        return True

    def delete(self, path: str) -> bool:
        key = self.apply_prefix(path)
        logger.debug(f"删除对象 - 存储桶: {self.bucket}, 对象: {key}")

        self.client.delete_object(
            oss.DeleteObjectRequest(bucket=self.bucket, key=key),
            **self._options
        )

        return True

    def delete_dir(self, dirname: str) -> bool:
        """
        递归删除目录下的全部对象（包括目录占位对象）

        对象按每批最多 1000 个批量删除；任一批次失败即返回 False，
        不区分具体哪些对象删除失败。
        """
        dirname = dirname.rstrip(DIRECTORY_SEPARATOR) + DIRECTORY_SEPARATOR

        with performance_logger(logger, f"delete_dir({dirname})"):
            keys = [
                obj.key
                for page in self._list_pages(dirname, True)
                for obj in (page.contents or [])
            ]

            if not keys:
                logger.debug(f"目录为空，无需删除 - 存储桶: {self.bucket}, 目录: {dirname}")
                return True

            try:
                for start in range(0, len(keys), DELETE_BATCH_SIZE):
                    batch = keys[start:start + DELETE_BATCH_SIZE]
                    self.client.delete_multiple_objects(
                        oss.DeleteMultipleObjectsRequest(
                            bucket=self.bucket,
                            objects=[oss.DeleteObject(key=key) for key in batch],
                            quiet=True
                        ),
                        **self._options
                    )
            except Exception as e:
                logger.error(f"❌ 删除目录失败 - 存储桶: {self.bucket}, 目录: {dirname}, 错误: {str(e)}")
                return False

        logger.info(f"✅ 删除目录成功 - 存储桶: {self.bucket}, 目录: {dirname}, 对象数量: {len(keys)}")
        return True

    def create_dir(self, dirname: str, config: Config = None) -> Union[FileInfo, bool]:
        key = self.apply_prefix(dirname).rstrip(DIRECTORY_SEPARATOR) + DIRECTORY_SEPARATOR

        try:
            self.client.put_object(
                oss.PutObjectRequest(bucket=self.bucket, key=key, body=b'', **self._upload_fields(config)),
                **self._options
            )
        except Exception as e:
            logger.error(f"❌ 创建目录失败 - 存储桶: {self.bucket}, 目录: {key}, 错误: {str(e)}")
            return False

        return {'type': 'dir', 'path': dirname.strip(DIRECTORY_SEPARATOR)}

    def set_visibility(self, path: str, visibility: Union[Visibility, str]) -> Union[FileInfo, bool]:
        key = self.apply_prefix(path)
        acl = visibility_to_acl(visibility)

        try:
            self.client.put_object_acl(
                oss.PutObjectAclRequest(bucket=self.bucket, key=key, acl=acl),
                **self._options
            )
        except Exception as e:
            logger.error(f"❌ 设置对象ACL失败 - 存储桶: {self.bucket}, 对象: {key}, ACL: {acl}, 错误: {str(e)}")
            return False

        return {'visibility': Visibility(visibility)}

    def get_visibility(self, path: str) -> Optional[FileInfo]:
        key = self.apply_prefix(path)

        def get_acl() -> FileInfo:
            result = self.client.get_object_acl(
                oss.GetObjectAclRequest(bucket=self.bucket, key=key),
                **self._options
            )
            return {'visibility': acl_to_visibility(result.acl)}

        return handle_request(get_acl)
