from __future__ import annotations

import json
from pathlib import Path
from typing import Dict

import pytest

from feature_status import pipeline
from feature_status.errors import ConfigurationError, ParseError, SourceUnavailable
from feature_status.infra.config_loader import AppConfig
from feature_status.networks import Network
from feature_status.pipeline import run, run_from_config
from feature_status.status_report import FeatureStatusReport
from helpers import declaration, key, report_doc

UPSTREAM = (
    declaration("alpha", key(1))
    + declaration("beta", key(2))
    + declaration("gamma", key(3))
    + declaration("delta", key(4))
)


class MemoryFetcher:
    def __init__(self, text: str) -> None:
        self.text = text
        self.versions = []

    def fetch(self, version: str) -> str:
        self.versions.append(version)
        return self.text


class MemoryStatus:
    def __init__(self, active: Dict[Network, list]) -> None:
        self.active = active

    def load(self, network: Network) -> FeatureStatusReport:
        if network not in self.active:
            raise SourceUnavailable("offline", subject=network.value)
        doc = report_doc(active=self.active[network])
        return FeatureStatusReport.from_json(json.dumps(doc))


def _status() -> MemoryStatus:
    return MemoryStatus(
        {
            Network.TESTNET: [key(2), key(3), key(4)],
            Network.DEVNET: [key(3), key(4)],
            Network.MAINNET_BETA: [key(4)],
        }
    )


def test_run_writes_artifact(tmp_path: Path) -> None:
    out = tmp_path / "dir" / "emit.rs.txt"
    fetcher = MemoryFetcher(UPSTREAM)

    summary = run("2.1.0", fetcher=fetcher, status_source=_status(), output=out)

    assert fetcher.versions == ["2.1.0"]
    assert summary.output == out
    assert summary.counts() == {
        "inactive": 1,
        "active_testnet": 1,
        "active_devnet": 1,
        "active_mainnet": 1,
    }
    text = out.read_text(encoding="utf-8")
    assert "// As of `2.1.0`." in text
    assert text.index("alpha::id(),") < text.index("beta::id(),") < text.index("gamma::id(),")
    assert text.rstrip().endswith("delta::id()\n];")


def test_failed_report_load_writes_nothing(tmp_path: Path) -> None:
    out = tmp_path / "emit.rs.txt"
    status = MemoryStatus({Network.TESTNET: [], Network.DEVNET: []})

    with pytest.raises(SourceUnavailable) as exc_info:
        run("2.1.0", fetcher=MemoryFetcher(UPSTREAM), status_source=status, output=out)

    assert exc_info.value.subject == "mainnet-beta"
    assert not out.exists()


def test_parse_failure_writes_nothing(tmp_path: Path) -> None:
    out = tmp_path / "emit.rs.txt"
    fetcher = MemoryFetcher(declaration("bad", "0000"))

    with pytest.raises(ParseError):
        run("2.1.0", fetcher=fetcher, status_source=_status(), output=out)
    assert not out.exists()


def test_run_from_config_with_saved_documents(tmp_path: Path) -> None:
    data_dir = tmp_path / "dir"
    data_dir.mkdir()
    for network, active in _status().active.items():
        (data_dir / network.filename).write_text(json.dumps(report_doc(active=active)), encoding="utf-8")
    source = tmp_path / "feature_set.rs"
    source.write_text(UPSTREAM, encoding="utf-8")

    config = AppConfig.model_validate(
        {
            "solana": {"data_dir": str(data_dir)},
            "output": {"path": str(data_dir / "emit.rs.txt"), "static_name": "FEATURES"},
        }
    )
    summary = run_from_config(config, "2.1.0", no_fetch=True, source_file=source)

    assert summary.output.read_text(encoding="utf-8").count("::id()") == 4
    assert "static FEATURES: &[Pubkey]" in summary.output.read_text(encoding="utf-8")


def test_configuration_error_propagates(tmp_path: Path, monkeypatch) -> None:
    def partial_reports(source):
        return {Network.TESTNET: source.load(Network.TESTNET)}

    monkeypatch.setattr(pipeline, "load_reports", partial_reports)

    with pytest.raises(ConfigurationError):
        run("2.1.0", fetcher=MemoryFetcher(UPSTREAM), status_source=_status(), output=tmp_path / "x")
    assert not (tmp_path / "x").exists()
