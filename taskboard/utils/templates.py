# taskboard/utils/templates.py
from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from taskboard.schemas.principal import RoleName
from taskboard.utils import policy

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["RoleName"] = RoleName
templates.env.globals["policy"] = policy


def render(request: Request, template: str, context: dict = None, status_code: int = 200):
    """Render a page with the signed-in principal and any flash messages"""
    page = {
        "principal": getattr(request.state, "principal", None),
        "current_path": request.url.path,
        "success": request.query_params.get("success"),
        "error": request.query_params.get("error"),
    }
    page.update(context or {})
    return templates.TemplateResponse(request, template, page, status_code=status_code)
