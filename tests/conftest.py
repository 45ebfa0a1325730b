"""
测试配置与公共夹具

FakeOssClient 在内存中模拟 alibabacloud_oss_v2.Client 的对象操作，
接收真实的SDK请求模型，返回结构相同的轻量结果对象。
"""
import io
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from ossFilesystem import AliyunOssAdapter

LAST_MODIFIED = datetime(2024, 1, 1, tzinfo=timezone.utc)
LAST_MODIFIED_TS = 1704067200


class FakeServiceError(Exception):
    """模拟 alibabacloud_oss_v2.exceptions.ServiceError"""

    def __init__(self, status_code: int, code: str = "", message: str = ""):
        super().__init__(f"Http Status Code: {status_code}. Error Code: {code}. Message: {message}")
        self.status_code = status_code
        self.code = code


class FakeOperationError(Exception):
    """模拟 alibabacloud_oss_v2.exceptions.OperationError"""

    def __init__(self, name: str, error: Exception):
        super().__init__(f"Operation error {name}: {error}")
        self._error = error

    def unwrap(self) -> Exception:
        return self._error


def not_found(name: str) -> FakeOperationError:
    return FakeOperationError(name, FakeServiceError(404, "NoSuchKey", "The specified key does not exist."))


def access_denied(name: str) -> FakeOperationError:
    return FakeOperationError(name, FakeServiceError(403, "AccessDenied", "You have no right to access this object."))


class FakeOssClient:
    """内存版OSS客户端"""

    def __init__(self, page_size: Optional[int] = None):
        self.objects: Dict[str, Dict[str, Any]] = {}
        self.calls: List[tuple] = []
        self.fail_on: Dict[str, Exception] = {}
        self.page_size = page_size

    def _record(self, name: str, request: Any, kwargs: Dict[str, Any]):
        self.calls.append((name, request, kwargs))
        if name in self.fail_on:
            raise self.fail_on[name]

    def calls_to(self, name: str) -> List[tuple]:
        return [call for call in self.calls if call[0] == name]

    def put(self, key: str, body: bytes = b'', content_type: Optional[str] = None, acl: str = 'default'):
        self.objects[key] = {
            'body': body,
            'content_type': content_type,
            'acl': acl,
            'last_modified': LAST_MODIFIED,
        }

    def _get(self, name: str, key: str) -> Dict[str, Any]:
        if key not in self.objects:
            raise not_found(name)
        return self.objects[key]

    def head_object(self, request, **kwargs):
        self._record('head_object', request, kwargs)
        obj = self._get('HeadObject', request.key)
        return SimpleNamespace(
            status_code=200,
            content_length=len(obj['body']),
            content_type=obj['content_type'],
            last_modified=obj['last_modified'],
            etag='"etag"'
        )

    def get_object(self, request, **kwargs):
        self._record('get_object', request, kwargs)
        obj = self._get('GetObject', request.key)
        return SimpleNamespace(
            status_code=200,
            body=io.BytesIO(obj['body']),
            content_length=len(obj['body']),
            content_type=obj['content_type'],
            last_modified=obj['last_modified']
        )

    def put_object(self, request, **kwargs):
        self._record('put_object', request, kwargs)
        self.put(request.key, request.body or b'', request.content_type, request.acl or 'default')
        return SimpleNamespace(status_code=200, etag='"etag"')

    def copy_object(self, request, **kwargs):
        self._record('copy_object', request, kwargs)
        source = self._get('CopyObject', request.source_key)
        self.objects[request.key] = dict(source)
        return SimpleNamespace(status_code=200)

    def delete_object(self, request, **kwargs):
        self._record('delete_object', request, kwargs)
        self.objects.pop(request.key, None)
        return SimpleNamespace(status_code=204)

    def delete_multiple_objects(self, request, **kwargs):
        self._record('delete_multiple_objects', request, kwargs)
        for obj in request.objects:
            self.objects.pop(obj.key, None)
        return SimpleNamespace(status_code=200, deleted_objects=[])

    def list_objects(self, request, **kwargs):
        self._record('list_objects', request, kwargs)
        prefix = request.prefix or ''
        marker = request.marker or ''
        max_keys = request.max_keys or 1000
        if self.page_size:
            max_keys = min(max_keys, self.page_size)

        contents, common_prefixes = [], []
        seen_prefixes = set()
        last = None
        next_marker = None
        count = 0

        for key in sorted(self.objects):
            if not key.startswith(prefix) or key <= marker:
                continue

            if request.delimiter:
                index = key.find(request.delimiter, len(prefix))
                if index != -1:
                    common = key[:index + 1]
                    if common in seen_prefixes or common <= marker:
                        continue
                    if count == max_keys:
                        next_marker = last
                        break
                    seen_prefixes.add(common)
                    common_prefixes.append(SimpleNamespace(prefix=common))
                    last = common
                    count += 1
                    continue

            if count == max_keys:
                next_marker = last
                break
            obj = self.objects[key]
            contents.append(SimpleNamespace(
                key=key,
                size=len(obj['body']),
                last_modified=obj['last_modified']
            ))
            last = key
            count += 1

        return SimpleNamespace(
            status_code=200,
            contents=contents or None,
            common_prefixes=common_prefixes or None,
            is_truncated=next_marker is not None,
            next_marker=next_marker
        )

    def get_object_acl(self, request, **kwargs):
        self._record('get_object_acl', request, kwargs)
        obj = self._get('GetObjectAcl', request.key)
        return SimpleNamespace(status_code=200, acl=obj['acl'])

    def put_object_acl(self, request, **kwargs):
        self._record('put_object_acl', request, kwargs)
        obj = self._get('PutObjectAcl', request.key)
        obj['acl'] = request.acl
        return SimpleNamespace(status_code=200)


@pytest.fixture
def fake_client() -> FakeOssClient:
    return FakeOssClient()


@pytest.fixture
def adapter(fake_client: FakeOssClient) -> AliyunOssAdapter:
    return AliyunOssAdapter(fake_client, 'test-bucket', prefix='uploads')
