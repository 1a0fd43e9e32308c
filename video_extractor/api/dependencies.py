"""
FastAPI dependency injection.

Only configuration is injected into routes; the Slack runtime lives on
app.state and is managed by the lifespan in main.py.
"""

from typing import Annotated

from fastapi import Depends

from ..config.settings import Settings, get_settings

SettingsDep = Annotated[Settings, Depends(get_settings)]
