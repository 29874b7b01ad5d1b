# pyright: reportUnusedImport=false
# flake8: noqa

from .config import (
    Settings,
    RenderSettings,
    BuilderSettings,
    load_settings,
)
