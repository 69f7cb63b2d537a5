"""
API 集成测试
"""

from datetime import datetime
import json

import pytest
from fastapi.testclient import TestClient

from cryptosight.adapters import JsonlQueryLogAdapter
from cryptosight.api.dependencies import ServiceContainer, get_query_log
from cryptosight.api.main import create_app
from cryptosight.domain.models import CommandKind, QueryLogEntry
from cryptosight.infrastructure.config import Settings


PEPE_ADDRESS = "0x6982508145454Ce325dDbE47a25d4ec3d2311933"


@pytest.fixture
def query_log(tmp_path):
    """写入了三条记录的 JSONL 查询日志"""
    path = tmp_path / "query_log.jsonl"
    entries = [
        QueryLogEntry(
            user_id="42",
            command=CommandKind.ANALYZE,
            response={"price": 0.00001234, "safetyScore": "80%"},
            token_address=PEPE_ADDRESS,
            chain_id="ethereum",
            token_id="PEPE",
            token_name="Pepe",
            created_at=datetime(2024, 5, 1, 12, 0),
        ),
        QueryLogEntry(
            user_id="42",
            command=CommandKind.PRICE,
            response={"price": 0.0000125},
            chain_id="ethereum",
            token_id="PEPE",
            token_name="Pepe",
            created_at=datetime(2024, 5, 1, 12, 5),
        ),
        QueryLogEntry(
            user_id="7",
            command=CommandKind.PRICE,
            response={"price": 64000.0},
            token_id="BTC",
            token_name="Bitcoin",
            created_at=datetime(2024, 5, 1, 12, 10),
        ),
    ]
    path.write_text(
        "".join(json.dumps(e.to_dict()) + "\n" for e in entries),
        encoding="utf-8",
    )
    return JsonlQueryLogAdapter(str(path))


@pytest.fixture
def container(monkeypatch, query_log):
    """不启动 Telegram 的服务容器"""
    monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
    return ServiceContainer(Settings(), query_log=query_log)


@pytest.fixture
def test_client(container):
    """创建测试客户端（执行完整生命周期）"""
    with TestClient(create_app(container)) as client:
        yield client


class TestHealthEndpoints:
    """健康检查端点测试"""

    def test_root(self, test_client):
        response = test_client.get("/")

        assert response.status_code == 200
        assert response.json() == {"status": "OK"}

    def test_health_check(self, test_client):
        """测试健康检查"""
        response = test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["telegram"] == "disabled"
        assert "hits" in data["cache"]

    def test_ready_check(self, test_client):
        assert test_client.get("/ready").json() == {"ready": True}

    def test_live_check(self, test_client):
        assert test_client.get("/live").json() == {"alive": True}


class TestQueryLogEndpoints:
    """查询日志端点测试"""

    def test_recent_analyses(self, test_client):
        response = test_client.get("/analyze")

        assert response.status_code == 200
        [record] = response.json()
        assert record["token_address"] == PEPE_ADDRESS
        assert record["command"] == "analyze"
        assert record["response"]["safetyScore"] == "80%"

    def test_analyses_by_address(self, test_client):
        response = test_client.get("/analyze", params={"tokenAddress": "0xdeadbeef"})

        assert response.status_code == 200
        assert response.json() == []

    def test_recent_prices_newest_first(self, test_client):
        data = test_client.get("/price").json()

        assert [r["token_id"] for r in data] == ["BTC", "PEPE"]

    def test_prices_by_token_id(self, test_client):
        data = test_client.get("/price", params={"tokenId": "PEPE"}).json()

        assert len(data) == 1
        assert data[0]["token_name"] == "Pepe"

    def test_limit(self, test_client):
        data = test_client.get("/price", params={"limit": 1}).json()

        assert len(data) == 1

    def test_limit_out_of_range(self, test_client):
        assert test_client.get("/price", params={"limit": 0}).status_code == 422


class TestMiddleware:
    """中间件测试"""

    def test_security_headers(self, test_client):
        response = test_client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Cache-Control"] == "no-store"

    def test_request_id_echoed(self, test_client):
        response = test_client.get("/", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"
        assert response.headers["X-Response-Time"].endswith("ms")


class TestErrorHandling:
    """错误处理测试"""

    def test_unhandled_error_returns_500(self, container):
        class BrokenQueryLog:
            async def get_recent_queries(self, *args, **kwargs):
                raise RuntimeError("disk gone")

        app = create_app(container)
        app.dependency_overrides[get_query_log] = lambda: BrokenQueryLog()

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/analyze")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}
