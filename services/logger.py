"""
增强日志模块 - 支持结构化日志、性能监控
"""
import json
import logging
import os
import sys
import time
import traceback
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional
from contextlib import contextmanager

from config import get_logging_settings

CONSOLE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)-25s | %(message)s'

class StructuredFormatter(logging.Formatter):
    """结构化日志格式化器"""

    def format(self, record: logging.LogRecord) -> str:
        """格式化日志记录"""
        # 基础信息
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage()
        }

        # 添加异常信息
        if record.exc_info:
            exc_type = record.exc_info[0]
            log_data["exception"] = {
                "type": getattr(exc_type, '__name__', str(exc_type)) if exc_type else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info)
            }

        # 添加额外字段
        extra_fields = getattr(record, 'extra_fields', None)
        if extra_fields:
            log_data.update(extra_fields)

        # 添加性能指标
        performance_data = getattr(record, 'performance', None)
        if performance_data:
            log_data['performance'] = performance_data

        return json.dumps(log_data, ensure_ascii=False, default=str)

class PerformanceLogger:
    """性能日志记录器"""

    def __init__(self, logger: logging.Logger, operation: str):
        self.logger = logger
        self.operation = operation
        self.start_time = time.perf_counter()

    def finish(self, success: bool = True, extra_info: Optional[Dict[str, Any]] = None):
        """完成性能记录"""
        duration = time.perf_counter() - self.start_time

        performance_data = {
            'operation': self.operation,
            'duration_ms': round(duration * 1000, 2),
            'success': success
        }

        if extra_info:
            performance_data.update(extra_info)

        # 根据耗时选择日志级别
        if duration > 1.0:
            level = logging.WARNING
        elif duration > 0.5:
            level = logging.INFO
        else:
            level = logging.DEBUG

        self.logger.log(level, f"Performance: {self.operation} ({performance_data['duration_ms']}ms)",
                       extra={'performance': performance_data})
        return performance_data

@contextmanager
def performance_logger(logger: logging.Logger, operation: str):
    """性能日志上下文管理器"""
    perf_logger = PerformanceLogger(logger, operation)
    try:
        yield perf_logger
        perf_logger.finish(success=True)
    except Exception as e:
        perf_logger.finish(success=False, extra_info={'error': str(e)})
        raise

class EnhancedLogger:
    """增强日志管理器"""

    _loggers: Dict[str, logging.Logger] = {}
    _handlers: Dict[str, logging.Handler] = {}

    @classmethod
    def _setup_logging(cls):
        """设置日志系统"""
        log_settings = get_logging_settings()

        # 控制台处理器
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(cls._get_log_level(log_settings.console_level))
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        cls._handlers['console'] = console_handler

        # 文件处理器（结构化JSON）
        if log_settings.log_to_file:
            os.makedirs(log_settings.log_dir, exist_ok=True)
            file_handler = RotatingFileHandler(
                os.path.join(log_settings.log_dir, "oss_filesystem.log"),
                maxBytes=log_settings.max_file_size * 1024 * 1024,
                backupCount=log_settings.backup_count,
                encoding='utf-8'
            )
            file_handler.setLevel(cls._get_log_level(log_settings.file_level))
            file_handler.setFormatter(StructuredFormatter())
            cls._handlers['file'] = file_handler

    @classmethod
    def _get_log_level(cls, level_str: str, default_level: int = logging.INFO) -> int:
        """将日志级别名称转换为数值"""
        level_map = {
            "DEBUG": logging.DEBUG,
            "INFO": logging.INFO,
            "WARNING": logging.WARNING,
            "ERROR": logging.ERROR,
            "CRITICAL": logging.CRITICAL
        }
        return level_map.get((level_str or "").upper(), default_level)

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """获取指定名称的日志器"""
        # 确保日志系统已初始化
        if not cls._handlers:
            cls._setup_logging()

        if name not in cls._loggers:
            logger = logging.getLogger(name)
            logger.setLevel(logging.DEBUG)

            # 避免重复添加处理器
            if not logger.handlers:
                for handler in cls._handlers.values():
                    logger.addHandler(handler)

            cls._loggers[name] = logger

        return cls._loggers[name]

    @classmethod
    def reset(cls):
        """移除并关闭所有处理器（配置变更后重新初始化）"""
        for logger in cls._loggers.values():
            for handler in list(logger.handlers):
                if handler in cls._handlers.values():
                    logger.removeHandler(handler)
        for handler in cls._handlers.values():
            handler.close()
        cls._loggers.clear()
        cls._handlers.clear()

def get_logger(name: Optional[str] = None) -> logging.Logger:
    """获取日志器"""
    if name is None:
        name = "oss_filesystem"
    return EnhancedLogger.get_logger(name)
