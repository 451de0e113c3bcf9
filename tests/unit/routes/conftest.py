# tests/unit/routes/conftest.py
"""API 契约测试专用 fixtures.

提供 test_client 和认证会话相关的 fixtures.
"""

import pytest


@pytest.fixture
def client(app):
    """创建测试客户端."""
    return app.test_client()


@pytest.fixture
def viewer(seed):
    """当前登录用户."""
    return seed.user("viewer", name="Viewer", trust_level=2)


@pytest.fixture
def auth_client(app, viewer):
    """创建已认证的测试客户端."""
    client = app.test_client()
    with client.session_transaction() as session:
        session["_user_id"] = str(viewer.id)
    return client
