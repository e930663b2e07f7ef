"""通用工具：子进程执行、YAML 读写、日志、网络校验"""
