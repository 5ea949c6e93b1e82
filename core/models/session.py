# ============================================================================
# SYNC SESSION
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Core model - Per-run mutable state
# PURPOSE: Carry the "approve all" answer across writer calls in one run
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: SyncSession
# DEPENDENCIES: dataclasses
# ============================================================================
"""
Sync Session

One SyncSession is created at the start of each sync run and passed to
every writer call. Answering "a" at an overwrite prompt flips approve_all
for the remainder of that run only.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class SyncSession:
    """Mutable state scoped to a single sync run."""
    approve_all: bool = False
    force: bool = False

    # Bookkeeping for the end-of-run summary
    written: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    migrations: List[str] = field(default_factory=list)
    backed_up: List[str] = field(default_factory=list)
    orphans_moved: List[str] = field(default_factory=list)

    @property
    def skip_prompts(self) -> bool:
        """True when overwrites no longer need confirmation."""
        return self.force or self.approve_all


__all__ = ["SyncSession"]
