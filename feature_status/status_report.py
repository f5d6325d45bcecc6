"""
Typed model of `solana feature status --display-all --output json`.

One report per network. Everything is frozen once validated; the only query
the classifier needs is `is_active`.
"""
from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from feature_status.errors import FormatError, SourceUnavailable
from feature_status.identifier import Identifier
from feature_status.infra.logging_config import get_logger

logger = get_logger(__name__)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        strict=True,
    )


class FeatureStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Feature(_CamelModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: Identifier
    description: str
    status: FeatureStatus
    since_slot: Optional[int] = Field(None, ge=0)

    @field_validator("id", mode="before")
    @classmethod
    def _parse_id(cls, value: Any) -> Identifier:
        if isinstance(value, Identifier):
            return value
        # InvalidIdentifier is a ValueError, pydantic turns it into a ValidationError
        return Identifier.from_base58(value)

    @field_serializer("id")
    def _dump_id(self, value: Identifier) -> str:
        return value.to_base58()


class FeatureSet(_CamelModel):
    software_versions: List[str]
    feature_set: int
    stake_percent: float
    rpc_percent: float


class ClusterFeatureSets(_CamelModel):
    tool_feature_set: int
    feature_sets: List[FeatureSet]


class SoftwareVersion(_CamelModel):
    software_version: str
    stake_percent: float
    rpc_percent: float


class ClusterSoftwareVersions(_CamelModel):
    tool_software_version: str
    software_versions: List[SoftwareVersion]


class FeatureStatusReport(_CamelModel):
    features: List[Feature]
    feature_activation_allowed: bool
    cluster_feature_sets: ClusterFeatureSets
    cluster_software_versions: ClusterSoftwareVersions

    def is_active(self, feature_id: Identifier) -> bool:
        return any(
            feature.id == feature_id and feature.status is FeatureStatus.ACTIVE
            for feature in self.features
        )

    @classmethod
    def from_json(cls, text: Union[str, bytes], *, subject: Optional[str] = None) -> "FeatureStatusReport":
        try:
            return cls.model_validate_json(text)
        except ValidationError as exc:
            raise FormatError(f"malformed status report: {exc}", subject=subject) from exc

    @classmethod
    def from_json_file(cls, json_file: Union[str, Path]) -> "FeatureStatusReport":
        path = Path(json_file)
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise SourceUnavailable(f"unable to read status report: {exc}", subject=str(path)) from exc

        report = cls.from_json(raw, subject=str(path))
        logger.debug(
            "Status report loaded",
            extra={"extra_data": {"path": str(path), "features": len(report.features)}},
        )
        return report

    def to_json(self) -> str:
        return json.dumps(self.model_dump(mode="json", by_alias=True), indent=2)
