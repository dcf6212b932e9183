"""
A3 HTML Rendering

Jinja2 rendering of the print layout.
"""
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..config import Config
from ..models.a3_document import A3Document
from .layout import RegionView, prepare_regions

TEMPLATE_NAME = "a3.html.j2"


class A3HtmlRenderer:
    """Renders A3 documents to standalone HTML pages"""

    def __init__(self, templates_dir: Union[str, Path, None] = None):
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir or Config.TEMPLATES_DIR)),
            autoescape=select_autoescape(["html", "j2"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(
        self,
        document: A3Document,
        org_name: str = "",
        author_name: str = "",
        regions: Optional[List[RegionView]] = None,
        generated_at: Optional[datetime] = None,
    ) -> str:
        regions = regions if regions is not None else prepare_regions(document)
        template = self.env.get_template(TEMPLATE_NAME)
        return template.render(
            document=document,
            org_name=org_name,
            author_name=author_name,
            header=regions[0],
            left=[r for r in regions[1:] if r.grid_column == "1"],
            right=[r for r in regions[1:] if r.grid_column == "2"],
            generated_at=(generated_at or datetime.utcnow()).strftime("%Y-%m-%d %H:%M UTC"),
        )
