"""dev-manager — 开发环境管理工具"""

__version__ = "0.3.0"
