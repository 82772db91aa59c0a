from pathlib import Path

from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def get_templates() -> Jinja2Templates:
    """Шаблоны страниц парка (templates/vehicles/*)."""
    return Jinja2Templates(directory=str(TEMPLATES_DIR))
