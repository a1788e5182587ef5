"""Context object handed to every worker thread."""

from dataclasses import dataclass, field
from typing import Optional

from webworker.bootstrap.config import ServerConfig
from webworker.lifecycle.state import ServerLifecycle


@dataclass
class WorkerContext:
    """Read-only settings plus the lifecycle the worker reports to."""

    config: ServerConfig = field(default_factory=ServerConfig)
    lifecycle: Optional[ServerLifecycle] = None
