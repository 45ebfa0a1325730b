"""
OSS请求错误处理

将传输层的 404 错误转换为"未找到"结果，其余错误原样抛出。
"""

from typing import Any, Callable, Optional, TypeVar

T = TypeVar("T")

NOT_FOUND_STATUS = 404


def unwrap_error(exc: BaseException) -> BaseException:
    """
    获取SDK包装异常中的原始错误

    alibabacloud_oss_v2 的客户端方法抛出 OperationError，
    通过 unwrap() 可以取得其中的 ServiceError。
    """
    error = exc
    seen = set()
    while id(error) not in seen:
        seen.add(id(error))
        unwrap = getattr(error, "unwrap", None)
        if not callable(unwrap):
            break
        inner = unwrap()
        if inner is None:
            break
        error = inner
    return error


def get_status_code(exc: BaseException) -> Optional[int]:
    """获取错误携带的HTTP状态码，没有则返回 None"""
    status_code = getattr(unwrap_error(exc), "status_code", None)
    if status_code is None:
        return None
    try:
        return int(status_code)
    except (TypeError, ValueError):
        return None


def is_file_not_found(exc: BaseException) -> bool:
    """判断错误是否为对象不存在（HTTP 404）"""
    return get_status_code(exc) == NOT_FOUND_STATUS


def handle_request(callback: Callable[[], T],
                   default: Any = None,
                   is_not_found: Callable[[BaseException], bool] = is_file_not_found):
    """
    执行请求并处理"未找到"错误

    Args:
        callback: 实际发起请求的无参函数
        default: 对象不存在时的返回值
        is_not_found: 判断错误是否表示对象不存在

    Returns:
        callback 的返回值；对象不存在时返回 default
    """
    try:
        return callback()
    except Exception as exc:
        if is_not_found(exc):
            return default
        raise
