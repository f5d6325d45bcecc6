"""
Collaborators that obtain the inputs of a run.

- UpstreamFetcher / FileFetcher: `fetch(version) -> text` of the upstream
  feature set source.
- StatusDownloader: runs `solana feature status` for one network and saves the
  JSON document.
- ReportLoader: `load(network) -> FeatureStatusReport`, downloading first
  unless told to reuse the saved documents.
"""
from __future__ import annotations

import subprocess
import urllib.error
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Protocol

from feature_status.errors import STAGE_EXTRACTION, SourceUnavailable
from feature_status.infra.logging_config import get_logger
from feature_status.networks import Network
from feature_status.status_report import FeatureStatusReport

logger = get_logger(__name__)


class SourceFetcher(Protocol):
    def fetch(self, version: str) -> str: ...


class StatusSource(Protocol):
    def load(self, network: Network) -> FeatureStatusReport: ...


@dataclass(frozen=True)
class UpstreamFetcher:
    url_template: str
    timeout_s: float = 30.0
    user_agent: str = "feature-status/0.1"

    def url_for(self, version: str) -> str:
        return self.url_template.format(version=version)

    def fetch(self, version: str) -> str:
        url = self.url_for(version)
        req = urllib.request.Request(url, headers={"User-Agent": self.user_agent}, method="GET")
        try:
            with urllib.request.urlopen(req, timeout=self.timeout_s) as resp:
                text = resp.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            raise SourceUnavailable(
                f"upstream HTTPError {e.code}", subject=url, stage=STAGE_EXTRACTION
            ) from e
        except (urllib.error.URLError, OSError, UnicodeDecodeError) as e:
            raise SourceUnavailable(
                f"upstream fetch failed: {e}", subject=url, stage=STAGE_EXTRACTION
            ) from e

        logger.info(
            "Upstream source fetched",
            extra={"extra_data": {"version": version, "url": url, "chars": len(text)}},
        )
        return text


@dataclass(frozen=True)
class FileFetcher:
    """Reads a local copy of the upstream source; the version only labels the run."""

    path: Path

    def fetch(self, version: str) -> str:
        try:
            return Path(self.path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceUnavailable(
                f"unable to read upstream source: {e}", subject=str(self.path), stage=STAGE_EXTRACTION
            ) from e


@dataclass(frozen=True)
class StatusDownloader:
    data_dir: Path
    binary: str = "solana"

    def report_path(self, network: Network) -> Path:
        return Path(self.data_dir) / network.filename

    def command(self, network: Network) -> List[str]:
        return [
            self.binary,
            "feature",
            "status",
            "--display-all",
            "--output",
            "json",
            network.moniker,
        ]

    def download(self, network: Network) -> Path:
        cmd = self.command(network)
        try:
            proc = subprocess.run(cmd, capture_output=True, check=False)
        except OSError as e:
            raise SourceUnavailable(
                f"unable to run {self.binary}: {e}", subject=network.value
            ) from e

        if proc.returncode != 0:
            err = (proc.stderr or b"").decode("utf-8", errors="replace").strip()
            raise SourceUnavailable(
                f"{' '.join(cmd)} exited with {proc.returncode}: {err[:300]}",
                subject=network.value,
            )

        path = self.report_path(network)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(proc.stdout)
        except OSError as e:
            raise SourceUnavailable(
                f"unable to save status report: {e}", subject=str(path)
            ) from e

        logger.info(
            "Status report downloaded",
            extra={"extra_data": {"network": network.value, "path": str(path)}},
        )
        return path


@dataclass(frozen=True)
class ReportLoader:
    downloader: StatusDownloader
    no_fetch: bool = False

    def load(self, network: Network) -> FeatureStatusReport:
        if not self.no_fetch:
            self.downloader.download(network)
        return FeatureStatusReport.from_json_file(self.downloader.report_path(network))


def load_reports(source: StatusSource) -> Dict[Network, FeatureStatusReport]:
    """
    Load one report per network on a thread pool.

    Returns only after every load finished; the first failure (in network
    order) is raised and nothing is returned.
    """
    networks = list(Network)
    with ThreadPoolExecutor(max_workers=len(networks)) as executor:
        futures = {network: executor.submit(source.load, network) for network in networks}
    # executor shutdown waited for all of them
    return {network: future.result() for network, future in futures.items()}
