"""
Lea SDK — Python
Convenience exports for the base pod client APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import SDKConfig  # noqa: F401
from .errors import (  # noqa: F401
    AddressResolutionError,
    BootstrapFailed,
    BuildError,
    ChainStateError,
    DecodeFailed,
    ExecutionRejected,
    InputValidationError,
    LeaSdkError,
    MalformedResponse,
    OperationError,
    TransportError,
    TransportRejected,
)

# Types
from .types import (  # noqa: F401
    BASE_POD_HEX,
    Account,
    DecodedState,
    LedgerStateFragment,
    OperationKind,
    Response,
)

# Transport
from .rpc import Connection, HttpConnection, connect  # noqa: F401

# Tx helpers
from .tx.build import SystemProgram  # noqa: F401
from .tx.encode import BuiltTransaction, ManifestEncoder, ManifestSet, TransactionEncoder  # noqa: F401

# Chaining protocol
from .validate import ensure_ok  # noqa: F401
from .chain import TipResolution, TipStatus, fetch_prev_tx_hash, resolve_tip  # noqa: F401
from .bootstrap import BootstrapOutcome, BootstrapStatus, publish_keyset  # noqa: F401
from .balance import get_allowed_mint, get_balance, get_current_supply  # noqa: F401
from .base_pod import BasePod, run_with_prev_hash  # noqa: F401

__all__ = [
    "__version__",
    # Core
    "SDKConfig",
    "LeaSdkError", "OperationError",
    "InputValidationError", "AddressResolutionError", "BuildError", "TransportError",
    "MalformedResponse", "TransportRejected", "DecodeFailed", "ExecutionRejected",
    "ChainStateError", "BootstrapFailed",
    # Types
    "BASE_POD_HEX", "Account", "DecodedState", "LedgerStateFragment", "OperationKind", "Response",
    # Transport
    "Connection", "HttpConnection", "connect",
    # Tx
    "SystemProgram", "BuiltTransaction", "ManifestEncoder", "ManifestSet", "TransactionEncoder",
    # Chaining protocol
    "ensure_ok",
    "TipResolution", "TipStatus", "resolve_tip", "fetch_prev_tx_hash",
    "BootstrapOutcome", "BootstrapStatus", "publish_keyset",
    "get_balance", "get_current_supply", "get_allowed_mint",
    "BasePod", "run_with_prev_hash",
]
