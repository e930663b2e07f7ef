"""核心模块：配置、仓库同步、依赖、SSH、提交助手"""
