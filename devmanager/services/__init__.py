"""服务层：组合配置存储、执行器与交互端口"""
