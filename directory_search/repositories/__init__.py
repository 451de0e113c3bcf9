"""Repository 层: 仅负责 Query 组装与数据库读取."""
