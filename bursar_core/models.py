# bursar_core/models.py
from bursar_core.domain import *  # noqa: F401,F403
from bursar_core.domain import __all__  # noqa: F401
