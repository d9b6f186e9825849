"""
分配全链路集成测试。

从配置文件出发，经过 DocBudget 门面、CLI 与 HTTP API 三个入口，
验证同一批次在三条路径上得到一致的分配结果，以及目录热更新
对后续分配生效、对已返回结果无影响。
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml
from fastapi.testclient import TestClient
from typer.testing import CliRunner

from doc_budget import DocBudget
from doc_budget.cli.app import app
from doc_budget.cli.server import create_app
from doc_budget.errors import BudgetExceededError
from doc_budget.models import RepresentationMode, TierName

pytestmark = pytest.mark.integration

runner = CliRunner()

SHIPPED_CONFIG = Path(__file__).resolve().parents[2] / "configs" / "doc_budget.yaml"


# ============================================================
# 辅助函数
# ============================================================


def set_standard_ceiling(config_file: Path, ceiling: int) -> None:
    """修改配置文件中 en 小档位的上限。"""
    data = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    for record in data["catalog"]:
        if record["language"] == "en" and record["tier_name"] == "standard":
            record["ceiling_tokens"] = ceiling
            record["hard_ceiling_tokens"] = ceiling
    config_file.write_text(yaml.safe_dump(data), encoding="utf-8")


def large_batch() -> list[dict]:
    """最小预算约 300k 的批次，超出 260k 的小档位。"""
    documents = [{
        "document_id": "core",
        "priority_tier": "CORE",
        "full_text_tokens": 200_000,
        "summary_tokens": 20_000,
    }]
    for index in range(4):
        documents.append({
            "document_id": f"imp_{index}",
            "priority_tier": "IMPORTANT",
            "full_text_tokens": 80_000,
            "summary_tokens": 25_000,
            "importance_score": 0.9 - index * 0.1,
        })
    return documents


# ============================================================
# 三个入口的一致性
# ============================================================


class TestEntryPointsAgree:
    """门面 / CLI / HTTP 的结果一致。"""

    def test_same_contract_everywhere(
        self, config_file: Path, scenario_records, tmp_path: Path
    ) -> None:
        planner = DocBudget(config_path=config_file)
        facade_contract = planner.allocate(scenario_records, language="en").to_contract()

        batch = tmp_path / "batch.json"
        batch.write_text(
            json.dumps({"language": "en", "documents": scenario_records}), encoding="utf-8"
        )
        cli_result = runner.invoke(
            app, ["allocate", "-i", str(batch), "-c", str(config_file), "-f", "json"]
        )
        assert cli_result.exit_code == 0
        cli_contract = json.loads(cli_result.stdout)["result"]

        client = TestClient(create_app(config_path=config_file))
        http_contract = client.post(
            "/allocate", json={"language": "en", "documents": scenario_records}
        ).json()["data"]

        assert facade_contract == cli_contract == http_contract
        assert facade_contract["totalTokens"] == 150_000


# ============================================================
# 内置配置文件
# ============================================================


class TestShippedConfig:
    """configs/doc_budget.yaml 的端到端行为。"""

    def test_config_validates(self) -> None:
        result = runner.invoke(app, ["validate", str(SHIPPED_CONFIG)])
        assert result.exit_code == 0

    def test_unknown_language_uses_wildcard(self, scenario_records) -> None:
        planner = DocBudget(config_path=SHIPPED_CONFIG)
        result = planner.allocate(scenario_records, language="de")

        assert result.selected_tier == TierName.STANDARD
        assert result.selected_model_id == "moonshotai/kimi-k2-0905"
        assert result.total_tokens == 150_000

    def test_large_batch_moves_to_extended(self) -> None:
        planner = DocBudget(config_path=SHIPPED_CONFIG)
        result = planner.allocate(large_batch(), language="ru")

        assert result.selected_tier == TierName.EXTENDED
        assert result.caching_enabled is True
        assert result.minimal_budget == 300_000
        assert result.total_tokens <= 700_000
        # 升级预算 400k，每篇升级成本 55k，全部 4 篇都能升级
        assert result.upgrade_count == 4

    def test_escalation_after_overflow(self, scenario_records) -> None:
        from doc_budget.budget import escalate_to_large_tier

        planner = DocBudget(config_path=SHIPPED_CONFIG)
        first = planner.allocate(scenario_records, language="en")
        escalated = escalate_to_large_tier(scenario_records, "en", planner.catalog)

        assert first.selected_tier == TierName.STANDARD
        assert escalated.selected_tier == TierName.EXTENDED
        assert escalated.total_tokens >= first.total_tokens


# ============================================================
# 目录热更新
# ============================================================


class TestHotReload:
    """分配过程中更新目录。"""

    def test_reload_changes_later_allocations(
        self, config_file: Path, scenario_records
    ) -> None:
        planner = DocBudget(config_path=config_file)
        before = planner.allocate(scenario_records, language="en")

        set_standard_ceiling(config_file, 100_000)
        planner.reload_catalog()
        after = planner.allocate(scenario_records, language="en")

        assert before.total_tokens == 150_000
        assert before.tier_ceiling_tokens == 150_000
        assert after.tier_ceiling_tokens == 100_000
        assert after.total_tokens == 70_000
        assert all(
            d.representation_mode == RepresentationMode.SUMMARY
            for d in after.decisions
            if d.priority_tier.value == "IMPORTANT"
        )

    def test_reload_through_http(self, config_file: Path, scenario_records) -> None:
        client = TestClient(create_app(config_path=config_file), raise_server_exceptions=False)
        payload = {"language": "en", "documents": scenario_records}

        assert client.post("/allocate", json=payload).json()["data"]["totalTokens"] == 150_000

        set_standard_ceiling(config_file, 100_000)
        reload_response = client.post("/catalog/reload")
        assert reload_response.status_code == 200
        assert reload_response.json()["metadata"]["version"] == 2

        assert client.post("/allocate", json=payload).json()["data"]["totalTokens"] == 70_000

        metrics = client.get("/metrics").json()["data"]
        assert metrics["total_tokens"]["count"] == 2

    def test_snapshot_is_stable_across_reload(self, config_file: Path) -> None:
        planner = DocBudget(config_path=config_file)
        snapshot = planner.catalog

        set_standard_ceiling(config_file, 10)
        planner.reload_catalog()

        assert snapshot.lookup("en", TierName.STANDARD).ceiling_tokens == 150_000
        assert planner.catalog.lookup("en", TierName.STANDARD).ceiling_tokens == 10

    def test_tighter_catalog_rejects_batch(self, config_file: Path) -> None:
        planner = DocBudget(config_path=config_file)
        planner.allocate(large_batch(), language="en")

        data = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        for record in data["catalog"]:
            if record["tier_name"] == "extended":
                record["ceiling_tokens"] = 250_000
                record["hard_ceiling_tokens"] = 250_000
        config_file.write_text(yaml.safe_dump(data), encoding="utf-8")
        planner.reload_catalog()

        with pytest.raises(BudgetExceededError) as exc_info:
            planner.allocate(large_batch(), language="en")
        assert exc_info.value.details["required_tokens"] == 300_000
