## storyboarder/export_utils.py

import logging
import math
import os
from pathlib import Path
from typing import List, Optional, Sequence, Union

from fpdf import FPDF
from PIL import Image, ImageOps
from pydantic import ValidationError

from storyboarder.errors import ExportError
from storyboarder.models import PDFLayout, StoryboardPanel, StoryboardProject

logger = logging.getLogger(__name__)

PAGE_W, PAGE_H = 595, 842  # A4 in points
MARGIN = 36
GAP = 14
HEADER_H = 28
CAPTION_H = 14
METADATA_H = 64
MAX_METADATA_CHARS = 420

# (columns, rows) per page
_LAYOUT_GRID = {
    PDFLayout.SINGLE: (1, 1),
    PDFLayout.DOUBLE: (1, 2),
    PDFLayout.QUAD: (2, 2),
}


# --- JSON snapshots ---

def project_to_json(project: StoryboardProject, indent: int = 2) -> str:
    return project.model_dump_json(indent=indent)


def project_from_json(data: Union[str, bytes]) -> StoryboardProject:
    try:
        return StoryboardProject.model_validate_json(data)
    except ValidationError as e:
        raise ExportError("Invalid project snapshot", {"errors": e.error_count()}) from e


def save_project(project: StoryboardProject, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(project_to_json(project), encoding="utf-8")
    logger.info("Saved project %s to %s", project.id, path)
    return path


def load_project(path: Union[str, Path]) -> StoryboardProject:
    path = Path(path)
    if not path.exists():
        raise ExportError(f"Project file not found: {path}")
    return project_from_json(path.read_text(encoding="utf-8"))


# --- Images ---

def make_grid_image(paths: List[str], columns: int = 3, pad: int = 8, bg=(245, 245, 245)) -> Image.Image:
    if not paths:
        raise ExportError("No images to arrange")
    imgs = [Image.open(p).convert("RGB") for p in paths]
    columns = max(1, min(columns, len(imgs)))
    w, h = max(i.width for i in imgs), max(i.height for i in imgs)
    rows = math.ceil(len(imgs) / columns)
    grid = Image.new("RGB", (columns * w + (columns + 1) * pad, rows * h + (rows + 1) * pad), color=bg)
    for idx, im in enumerate(imgs):
        r, c = divmod(idx, columns)
        x, y = pad + c * (w + pad), pad + r * (h + pad)
        grid.paste(ImageOps.contain(im, (w, h)), (x, y))
    return grid


def panel_image_path(panel: StoryboardPanel) -> Optional[str]:
    """Local file behind a panel's image, if any."""
    url = panel.generated_image_url
    if url and os.path.isfile(url):
        return url
    return None


# --- PDF ---

def _latin1(text: str) -> str:
    # core PDF fonts only cover latin-1
    return (text or "").encode("latin-1", "replace").decode("latin-1")


def _fit(path: str, box_w: float, box_h: float):
    with Image.open(path) as im:
        ratio = min(box_w / im.width, box_h / im.height)
        return im.width * ratio, im.height * ratio


def _draw_header(pdf: FPDF, project: StoryboardProject, page: int, pages: int):
    pdf.set_xy(MARGIN, MARGIN)
    pdf.set_font("Helvetica", style="B", size=14)
    pdf.cell(PAGE_W - 2 * MARGIN - 60, 18, _latin1(project.title or "Storyboard"))
    pdf.set_font("Helvetica", size=9)
    pdf.cell(60, 18, f"{page} / {pages}", align="R")


def _draw_panel(pdf: FPDF, panel: StoryboardPanel, image: Optional[str], x: float, y: float,
                w: float, h: float, include_metadata: bool):
    pdf.set_xy(x, y)
    pdf.set_font("Helvetica", style="B", size=10)
    label = f"Panel {panel.panel_number} - {panel.prompt.panel_type.value.replace('_', ' ')}"
    pdf.cell(w, CAPTION_H, _latin1(label))

    box_y = y + CAPTION_H + 2
    box_h = h - CAPTION_H - 2 - (METADATA_H if include_metadata else 0)
    if image:
        img_w, img_h = _fit(image, w, box_h)
        pdf.image(image, x=x + (w - img_w) / 2, y=box_y + (box_h - img_h) / 2, w=img_w, h=img_h)
    else:
        pdf.set_draw_color(180, 180, 180)
        pdf.rect(x, box_y, w, box_h)
        pdf.set_xy(x, box_y + box_h / 2 - 6)
        pdf.set_font("Helvetica", size=9)
        pdf.cell(w, 12, "No image generated", align="C")

    if include_metadata:
        text = panel.prompt.generated_prompt or panel.prompt.scene_description
        if len(text) > MAX_METADATA_CHARS:
            text = text[:MAX_METADATA_CHARS].rstrip() + "..."
        pdf.set_xy(x, box_y + box_h + 4)
        pdf.set_font("Helvetica", size=7)
        pdf.multi_cell(w, 8, _latin1(text))


def make_pdf_bytes(
    project: StoryboardProject,
    layout: PDFLayout = PDFLayout.DOUBLE,
    include_metadata: bool = True,
    image_paths: Optional[Sequence[Optional[str]]] = None,
) -> bytes:
    """
    Render a project's panels onto A4 pages, 1, 2 or 4 per page.
    `image_paths` overrides the panels' own image locations, position by position.
    """
    if not project.panels:
        raise ExportError("Project has no panels to export", {"project_id": project.id})
    columns, rows = _LAYOUT_GRID[PDFLayout(layout)]
    per_page = columns * rows
    pages = math.ceil(len(project.panels) / per_page)

    cell_w = (PAGE_W - 2 * MARGIN - (columns - 1) * GAP) / columns
    cell_h = (PAGE_H - 2 * MARGIN - HEADER_H - (rows - 1) * GAP) / rows

    pdf = FPDF(unit="pt", format="A4")
    pdf.set_auto_page_break(auto=False)
    pdf.set_title(_latin1(project.title))

    for index, panel in enumerate(project.panels):
        slot = index % per_page
        if slot == 0:
            pdf.add_page()
            _draw_header(pdf, project, index // per_page + 1, pages)
        row, col = divmod(slot, columns)
        x = MARGIN + col * (cell_w + GAP)
        y = MARGIN + HEADER_H + row * (cell_h + GAP)
        image = None
        if image_paths is not None and index < len(image_paths):
            image = image_paths[index]
        image = image or panel_image_path(panel)
        _draw_panel(pdf, panel, image, x, y, cell_w, cell_h, include_metadata)

    logger.info("Rendered %d panels into %d PDF pages (%s)", len(project.panels), pages, PDFLayout(layout).value)
    return bytes(pdf.output())
