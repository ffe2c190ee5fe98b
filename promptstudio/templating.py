"""
Shared Jinja2 environment for all routers.
"""
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi.templating import Jinja2Templates

from promptstudio.config import get_settings
from promptstudio.frameworks import get_framework_name

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def format_datetime(value: Optional[datetime], fmt: str = "%b %d, %Y %H:%M") -> str:
    if value is None:
        return ""
    return value.strftime(fmt)


templates.env.filters["datetime"] = format_datetime
templates.env.filters["framework_name"] = get_framework_name
templates.env.globals["app_name"] = get_settings().app_name
