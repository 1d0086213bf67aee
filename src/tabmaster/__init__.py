"""TabMaster: browser window naming, rename history and window merging.

Loads environment variables from a local `.env` file if present so the
Gemini client and provider settings pick up keys without extra plumbing.
"""

from dotenv import load_dotenv

load_dotenv()

from .config import TabMasterSettings  # noqa: E402
from .naming import generate_window_name, generate_window_names  # noqa: E402
from .orchestration.runtime import TabMasterRuntime  # noqa: E402
from .providers.providers import select_provider  # noqa: E402

__all__ = [
    "TabMasterRuntime",
    "TabMasterSettings",
    "generate_window_name",
    "generate_window_names",
    "select_provider",
]
