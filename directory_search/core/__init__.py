"""共享内核: 异常、类型与常量(不依赖 Flask)."""
