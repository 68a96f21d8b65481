"""apimux — resilient multi-provider API façade for chat-bot commands.

Every capability (media downloads, search, AI chat, image tools,
translation, weather, ...) is one async call that tries a fixed list of
public upstream providers in order and returns a shape-stable result.
"""

from apimux.config import FacadeConfig
from apimux.factory import create_facade
from apimux.version import __version__

__all__: list[str] = ["FacadeConfig", "__version__", "create_facade"]
