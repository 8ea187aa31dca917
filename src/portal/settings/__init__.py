from .base import *  # noqa: F403
from .observability import *  # noqa: F403
from .questionnaires import *  # noqa: F403
