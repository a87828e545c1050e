"""Reference node types built on the capability model.

- ConfigValue: a literal value
- WorkflowService: a service implemented by a hand-written local module
- HealthCheckWrapper: a service adding ``health_check()`` to another service
- Process: a runnable process module containing other nodes
"""

from .config_value import ConfigValue
from .healthcheck import HealthCheckWrapper
from .process import Process
from .workflow import WorkflowService

__all__ = [
    "ConfigValue",
    "HealthCheckWrapper",
    "Process",
    "WorkflowService",
]
