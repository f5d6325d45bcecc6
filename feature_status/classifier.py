"""
Classifier.

Each known feature lands in exactly one bucket, chosen by the most advanced
cluster it is active on:

    mainnet-beta > devnet > testnet > inactive

All three reports are always queried, even when a higher-priority cluster has
already answered.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple, Union

import deal

from feature_status.errors import ConfigurationError
from feature_status.extractor import NamedIdentifier
from feature_status.networks import PRIORITY, Network
from feature_status.status_report import FeatureStatusReport

Reports = Union[
    Mapping[Network, FeatureStatusReport],
    Iterable[Tuple[Network, FeatureStatusReport]],
]


class Bucket(str, Enum):
    INACTIVE = "inactive"
    ACTIVE_TESTNET = "active_testnet"
    ACTIVE_DEVNET = "active_devnet"
    ACTIVE_MAINNET = "active_mainnet"


_BUCKET_FOR: Dict[Network, Bucket] = {
    Network.MAINNET_BETA: Bucket.ACTIVE_MAINNET,
    Network.DEVNET: Bucket.ACTIVE_DEVNET,
    Network.TESTNET: Bucket.ACTIVE_TESTNET,
}


@dataclass(frozen=True)
class ClassificationResult:
    inactive: Tuple[str, ...] = field(default_factory=tuple)
    active_testnet: Tuple[str, ...] = field(default_factory=tuple)
    active_devnet: Tuple[str, ...] = field(default_factory=tuple)
    active_mainnet: Tuple[str, ...] = field(default_factory=tuple)

    def bucket(self, bucket: Bucket) -> Tuple[str, ...]:
        return getattr(self, bucket.value)

    def groups(self) -> List[Tuple[Bucket, Tuple[str, ...]]]:
        """Buckets in artifact order: inactive, testnet, devnet, mainnet-beta."""
        return [(b, self.bucket(b)) for b in Bucket]

    def labels(self) -> List[str]:
        return [label for _, labels in self.groups() for label in labels]

    def __len__(self) -> int:
        return sum(len(labels) for _, labels in self.groups())


def _collect_reports(reports: Reports) -> Dict[Network, FeatureStatusReport]:
    pairs = reports.items() if isinstance(reports, Mapping) else reports

    collected: Dict[Network, FeatureStatusReport] = {}
    for network, report in pairs:
        if not isinstance(network, Network):
            raise ConfigurationError(f"unknown network tag: {network!r}")
        if network in collected:
            raise ConfigurationError("duplicate status report", subject=network.value)
        collected[network] = report

    missing = [n.value for n in Network if n not in collected]
    if missing:
        raise ConfigurationError(f"missing status report for: {', '.join(missing)}")
    return collected


def bucket_for(active: Mapping[Network, bool]) -> Bucket:
    for network in PRIORITY:
        if active[network]:
            return _BUCKET_FOR[network]
    return Bucket.INACTIVE


@deal.raises(ConfigurationError)
@deal.ensure(
    lambda features, reports, result: len(result) == len(features),
    message="every feature lands in exactly one bucket",
)
def classify(features: Sequence[NamedIdentifier], reports: Reports) -> ClassificationResult:
    by_network = _collect_reports(reports)

    buckets: Dict[Bucket, List[str]] = {b: [] for b in Bucket}
    for named in features:
        active = {network: by_network[network].is_active(named.id) for network in Network}
        buckets[bucket_for(active)].append(named.label)

    return ClassificationResult(**{b.value: tuple(labels) for b, labels in buckets.items()})
