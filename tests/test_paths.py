"""
路径前缀测试
"""
import pytest

from ossFilesystem import AliyunOssAdapter


@pytest.mark.parametrize("prefix, expected", [
    ("", ""),
    ("uploads", "uploads/"),
    ("uploads/", "uploads/"),
    ("/uploads//", "uploads/"),
    ("a/b", "a/b/"),
    (None, ""),
])
def test_prefix_normalization(fake_client, prefix, expected):
    """测试前缀规范化为单个结尾斜杠"""
    adapter = AliyunOssAdapter(fake_client, "test-bucket", prefix=prefix)
    assert adapter.prefix == expected


def test_apply_prefix_single_separator(adapter):
    """测试前缀与路径之间只有一个分隔符"""
    assert adapter.apply_prefix("a/b.txt") == "uploads/a/b.txt"
    assert adapter.apply_prefix("/a/b.txt") == "uploads/a/b.txt"
    assert adapter.apply_prefix("//a/b.txt") == "uploads/a/b.txt"


def test_apply_prefix_root(adapter, fake_client):
    """测试根路径映射为前缀本身"""
    assert adapter.apply_prefix("") == "uploads/"
    assert AliyunOssAdapter(fake_client, "test-bucket").apply_prefix("") == ""


@pytest.mark.parametrize("path", [
    "file.txt",
    "a/b/c.txt",
    "dir/",
    "",
    "中文/文件.txt",
    "uploadsX/file",
])
def test_remove_prefix_inverts_apply_prefix(adapter, path):
    """测试 remove_prefix 是 apply_prefix 的逆运算"""
    assert adapter.remove_prefix(adapter.apply_prefix(path)) == path


def test_remove_prefix_without_prefix(fake_client):
    """测试无前缀时路径保持不变"""
    adapter = AliyunOssAdapter(fake_client, "test-bucket")
    assert adapter.apply_prefix("a/b") == "a/b"
    assert adapter.remove_prefix("a/b") == "a/b"


def test_remove_prefix_foreign_key(adapter):
    """测试不以前缀开头的键原样返回"""
    assert adapter.remove_prefix("other/file.txt") == "other/file.txt"


def test_bucket_required(fake_client):
    """测试存储桶名称必填"""
    with pytest.raises(ValueError):
        AliyunOssAdapter(fake_client, "")
