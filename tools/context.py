# =============================================================================
# tools/context.py  —  Everything a tool handler is allowed to touch
# =============================================================================
#
# Handlers never reach for globals.  Whoever assembles the server builds ONE
# ToolContext — config, stores, mailer, start time — and every tool factory
# closes over it.  Tests build their own context per test case, so state
# never leaks from one test into the next.
# =============================================================================

import time
from dataclasses import dataclass, field
from typing import Optional

from core.config import ServerConfig
from core.email_service import EmailService
from core.env_store import EnvVarStore
from core.task_store import TaskStore


@dataclass
class ToolContext:
    config: ServerConfig
    tasks: TaskStore = field(default_factory=TaskStore)
    env_vars: EnvVarStore = field(default_factory=EnvVarStore)
    email: Optional[EmailService] = None
    started_at: float = field(default_factory=time.monotonic)

    def __post_init__(self) -> None:
        if self.email is None:
            self.email = EmailService(self.config.email)

    @property
    def uptime_seconds(self) -> float:
        return time.monotonic() - self.started_at
