"""服务层: 编排 Repository 并输出 DTO."""
