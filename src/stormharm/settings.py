"""Project settings for ``kedro run``.

Only the config loader is set; everything else uses Kedro defaults.
"""

from kedro.config import OmegaConfigLoader

CONFIG_LOADER_CLASS = OmegaConfigLoader
