"""
lea_sdk.tx.encode
=================

Seam between the SDK and the manifest-driven transaction codec.

The byte-level encoding of Lea transactions is owned by an external codec;
the SDK only needs two calls from it, captured by the `TransactionEncoder`
protocol:

- build(kind, signers, constants, options) -> transaction object
- decode(raw_result, schema) -> decoded execution result

Manifests (per-operation instruction layouts, signer roles and constants) are
immutable configuration. `ManifestSet` holds them; `ManifestEncoder` adapts a
codec backend that works directly on manifest documents
(`create_transaction(manifest, signers, options)` /
`decode_execution_result(raw, manifest)`) to the `TransactionEncoder`
protocol, merging per-call constants into a private copy of the manifest.

Example
-------
    from lea_sdk.tx.encode import ManifestEncoder, ManifestSet

    encoder = ManifestEncoder(ManifestSet.from_directory("./manifests"), backend=my_codec)
    tx = encoder.build("burn", {"burner": keyset}, {"amount": "5"}, {"prevTxHash": tip})
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Union

from ..types import OperationKind

__all__ = [
    "TransactionEncoder",
    "ManifestBackend",
    "Manifest",
    "ManifestSet",
    "ManifestEncoder",
    "BuiltTransaction",
    "schema_name",
]


def schema_name(kind: Union[OperationKind, str]) -> str:
    return kind.value if isinstance(kind, OperationKind) else str(kind)


class TransactionEncoder(Protocol):
    """Minimal interface expected from the transaction codec."""

    def build(
        self,
        kind: str,
        signers: Mapping[str, Any],
        constants: Mapping[str, str],
        options: Mapping[str, Any],
    ) -> Any: ...

    def decode(self, raw: bytes, schema: str) -> Any: ...


class ManifestBackend(Protocol):
    """Codec operating on concrete manifest documents."""

    def create_transaction(
        self, manifest: Dict[str, Any], signers: Mapping[str, Any], options: Mapping[str, Any]
    ) -> Any: ...

    def decode_execution_result(self, raw: bytes, manifest: Dict[str, Any]) -> Any: ...


@dataclass(frozen=True)
class Manifest:
    name: str
    document: Mapping[str, Any]

    def with_constants(self, constants: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """
        Deep copy of the manifest with `constants` merged over its own.
        The stored document is never mutated.
        """
        doc = copy.deepcopy(dict(self.document))
        if constants:
            merged = dict(doc.get("constants") or {})
            merged.update(constants)
            doc["constants"] = merged
        return doc


@dataclass(frozen=True)
class ManifestSet:
    """Immutable kind -> manifest configuration."""

    manifests: Mapping[str, Manifest] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "manifests", MappingProxyType(dict(self.manifests)))

    @classmethod
    def from_documents(cls, documents: Mapping[str, Mapping[str, Any]]) -> "ManifestSet":
        return cls(
            {
                schema_name(k): Manifest(schema_name(k), MappingProxyType(copy.deepcopy(dict(v))))
                for k, v in documents.items()
            }
        )

    @classmethod
    def from_directory(cls, path: Union[str, Path]) -> "ManifestSet":
        """Load every `<kind>.json` file in `path` (e.g. transfer.json, get_balance.json)."""
        root = Path(path)
        if not root.is_dir():
            raise ValueError(f"manifest directory not found: {root}")
        docs: Dict[str, Any] = {}
        for p in sorted(root.glob("*.json")):
            try:
                docs[p.stem] = json.loads(p.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                raise ValueError(f"invalid manifest JSON in {p}: {e}") from e
        return cls.from_documents(docs)

    def get(self, kind: Union[OperationKind, str]) -> Manifest:
        name = schema_name(kind)
        try:
            return self.manifests[name]
        except KeyError:
            raise KeyError(f"no manifest configured for {name!r}") from None

    def __contains__(self, kind: object) -> bool:
        return isinstance(kind, (str, OperationKind)) and schema_name(kind) in self.manifests


class ManifestEncoder:
    """`TransactionEncoder` over a `ManifestSet` and a manifest-level codec."""

    def __init__(self, manifests: ManifestSet, backend: ManifestBackend) -> None:
        self.manifests = manifests
        self.backend = backend

    def build(
        self,
        kind: str,
        signers: Mapping[str, Any],
        constants: Mapping[str, str],
        options: Mapping[str, Any],
    ) -> Any:
        manifest = self.manifests.get(kind).with_constants(constants)
        return self.backend.create_transaction(manifest, dict(signers), dict(options))

    def decode(self, raw: bytes, schema: str) -> Any:
        manifest = self.manifests.get(schema).with_constants()
        return self.backend.decode_execution_result(raw, manifest)


@dataclass(frozen=True)
class BuiltTransaction:
    """
    A request ready for submission.

    `tx` is whatever the encoder produced; `decode` parses this request's
    execution result bytes using its operation schema.
    """

    kind: OperationKind
    tx: Any
    signers: Mapping[str, Any]
    constants: Mapping[str, str]
    options: Mapping[str, Any]
    decode: Callable[[bytes], Any] = field(repr=False, compare=False)

    @property
    def prev_tx_hash(self) -> Optional[bytes]:
        return self.options.get("prevTxHash")

    @property
    def payload(self) -> bytes:
        """Wire bytes of the transaction (raw bytes, or a `.tx`/`["tx"]` field)."""
        tx = self.tx
        if isinstance(tx, Mapping):
            tx = tx.get("tx")
        elif not isinstance(tx, (bytes, bytearray, memoryview)):
            tx = getattr(tx, "tx", tx)
        if isinstance(tx, (bytes, bytearray, memoryview)):
            return bytes(tx)
        raise TypeError(f"{self.kind.value}: encoder output carries no transaction bytes")
