"""用户目录服务."""
