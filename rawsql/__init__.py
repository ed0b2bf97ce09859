"""rawsql: table-name CRUD helpers with camelCase/snake_case key bridging."""

from .core import *  # noqa: F401,F403
from .core import __all__ as _core_all
from .ports import *  # noqa: F401,F403
from .ports import __all__ as _ports_all

__version__ = "0.1.0"

__all__ = [*_core_all, *_ports_all]
