"""devnetup: idempotent local devnet bootstrap.

Builds the node binary, generates network state only when it is absent,
points CometBFT indexing at Postgres, then hands off to process-compose:
  - Build gate with a release compile and an invocability check
  - Existence-gated, one-shot network generation
  - Insert-or-replace patch of the node config indexer
  - Attached supervisor launch with verbatim argument forwarding
  - Exit code pass-through and per-phase failure codes
"""

__version__ = "0.1.0"
__description__ = "Idempotent bootstrap for a local single-node devnet"

from devnetup.core.orchestrator import DevnetOrchestrator

__all__ = ["DevnetOrchestrator", "__version__"]
