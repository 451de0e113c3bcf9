"""用户高级检索与筛选选项服务."""
