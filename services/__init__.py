"""公共服务模块（日志等）"""
