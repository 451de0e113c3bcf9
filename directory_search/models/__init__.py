"""数据模型模块.

表结构由上游论坛系统维护,这里只声明检索与目录需要读取的列.

主要模型:
- User: 用户账户
- UserField / UserFieldOption: 自定义资料字段定义及其可选值
- UserCustomField: 用户自定义字段取值(同一用户同一键可能存在多行)
- DirectoryItem: 按统计周期预计算的目录统计行
- Group / GroupUser: 群组与成员关系
"""

__all__ = [
    "DirectoryItem",
    "Group",
    "GroupUser",
    "User",
    "UserCustomField",
    "UserField",
    "UserFieldOption",
]


def __getattr__(name: str):
    """延迟加载模型, 避免初始化周期引发的循环导入."""

    if name not in __all__:
        msg = f"module 'directory_search.models' has no attribute {name}"
        raise AttributeError(msg)

    from importlib import import_module

    module_map = {
        "DirectoryItem": "directory_search.models.directory_item",
        "Group": "directory_search.models.group",
        "GroupUser": "directory_search.models.group",
        "User": "directory_search.models.user",
        "UserCustomField": "directory_search.models.user_custom_field",
        "UserField": "directory_search.models.user_field",
        "UserFieldOption": "directory_search.models.user_field",
    }

    module = import_module(module_map[name])
    value = getattr(module, name)
    globals()[name] = value
    return value
