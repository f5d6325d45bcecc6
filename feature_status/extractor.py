"""
Definition extractor.

Recovers the ordered `(name, id)` pairs declared in an upstream feature set
source file, e.g.

    pub mod deprecate_rewards_sysvar {
        solana_sdk::declare_id!("GaBtBJvmS4Arjj5W1NmFcyvPjsHN38UGYDq2MDwbs9Qu");
    }
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

import deal

from feature_status.errors import ParseError
from feature_status.identifier import Identifier, InvalidIdentifier

# `[pub] mod <name> {` then anything but a brace, then `[path::]declare_id[!]("<id>");`
DECLARATION_RE = re.compile(
    r"""
    \bmod\s+(?P<name>\w+)\s*\{
    [^{}]*?
    (?:\w+::)*declare_id!?\(\s*"(?P<id>[^"]*)"\s*\)\s*;
    """,
    re.VERBOSE,
)


@dataclass(frozen=True, slots=True)
class NamedIdentifier:
    name: str
    id: Identifier

    @property
    def label(self) -> str:
        return f"{self.name}::id()"


@deal.raises(ParseError)
def extract_features(text: str) -> List[NamedIdentifier]:
    features: List[NamedIdentifier] = []
    for match in DECLARATION_RE.finditer(text):
        name = match.group("name")
        try:
            ident = Identifier.from_base58(match.group("id"))
        except InvalidIdentifier as exc:
            raise ParseError(f"invalid identifier in mod {name}: {exc}", subject=name) from exc
        features.append(NamedIdentifier(name=name, id=ident))
    return features
