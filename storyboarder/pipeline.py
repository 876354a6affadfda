## storyboarder/pipeline.py

import contextlib
import logging
import os
from functools import lru_cache
from typing import Dict, List, Optional, Sequence, Tuple

import torch
from diffusers import DPMSolverMultistepScheduler, StableDiffusionPipeline
from pydantic import BaseModel

from storyboarder.config import AppSettings
from storyboarder.errors import RenderError
from storyboarder.models import ProjectType, StoryboardProject
from storyboarder.projects import attach_panel_image, get_panel

logger = logging.getLogger(__name__)


class GenerationParams(BaseModel):
    steps: int
    guidance_scale: float
    width: int
    height: int
    negative_prompt: str = ""


STORYBOARD_PARAMS = GenerationParams(
    steps=25,
    guidance_scale=7.0,
    width=768,
    height=512,
    negative_prompt=", ".join([
        "color", "colored", "shading", "shadows", "rendering", "rendered", "photorealistic", "photo",
        "detailed texture", "polished", "finished", "clean lines", "digital art", "painting",
        "watercolor", "oil painting",
    ]),
)

ARCHITECTURAL_PARAMS = GenerationParams(
    steps=30,
    guidance_scale=8.0,
    width=768,
    height=576,
    negative_prompt=", ".join([
        "people", "characters", "color", "shading", "photorealistic", "perspective distortion",
        "sketchy lines", "messy", "background scenery", "watercolor", "painting",
    ]),
)

MINIWORLD_PARAMS = GenerationParams(
    steps=30,
    guidance_scale=8.0,
    width=768,
    height=768,
    negative_prompt=", ".join([
        "perspective distortion", "realistic photography", "photographic", "harsh shadows",
        "dramatic lighting", "dark shadows", "cluttered", "messy", "chaotic", "unorganized",
        "realistic render", "hyper-realistic", "dramatic angle", "wide angle", "fish eye", "distorted",
    ]),
)

_PARAMS: Dict[ProjectType, GenerationParams] = {
    ProjectType.STORYBOARD: STORYBOARD_PARAMS,
    ProjectType.ARCHITECTURAL: ARCHITECTURAL_PARAMS,
    ProjectType.MINI_WORLD: MINIWORLD_PARAMS,
}


def get_generation_params(project_type: ProjectType) -> GenerationParams:
    return _PARAMS.get(ProjectType(project_type), STORYBOARD_PARAMS).model_copy()


@lru_cache(maxsize=1)
def _get_device():
    return torch.device("cuda" if torch.cuda.is_available() else "cpu")


@lru_cache(maxsize=2)
def get_pipeline(candidates: Tuple[str, ...] = ("stabilityai/sd-turbo", "runwayml/stable-diffusion-v1-5")) -> StableDiffusionPipeline:
    """Load a diffusion pipeline once and cache it. Tries the candidates in order."""
    device = _get_device()
    dtype = torch.float16 if device.type == "cuda" else torch.float32

    last_err = None
    for name in candidates:
        try:
            logger.info("Loading model %s on %s (%s)", name, device, dtype)
            pipe = StableDiffusionPipeline.from_pretrained(name, torch_dtype=dtype, safety_checker=None)
            pipe.scheduler = DPMSolverMultistepScheduler.from_config(pipe.scheduler.config)
            pipe.to(device)
            if device.type == "cuda":
                pipe.enable_attention_slicing()
                pipe.enable_vae_slicing()
            logger.info("Model %s ready", name)
            return pipe
        except (OSError, ValueError, RuntimeError) as e:
            logger.warning("Failed to load %s: %s", name, e)
            last_err = e
    raise RenderError("Could not load any model", {"candidates": list(candidates), "last_error": str(last_err)})


def _is_turbo(pipe: StableDiffusionPipeline) -> bool:
    name = getattr(pipe, "_internal_dict", {}).get("_name_or_path", "")
    return "sd-turbo" in str(name).lower()


def get_backend_info(candidates: Sequence[str] = ("stabilityai/sd-turbo", "runwayml/stable-diffusion-v1-5")) -> str:
    pipe = get_pipeline(tuple(candidates))
    return getattr(pipe, "_internal_dict", {}).get("_name_or_path", "unknown")


def generate_batch(
    prompts: List[str],
    seeds: List[int],
    params: GenerationParams,
    outputs_dir: str = "outputs",
    candidates: Sequence[str] = ("stabilityai/sd-turbo", "runwayml/stable-diffusion-v1-5"),
    file_prefix: str = "panel",
) -> List[str]:
    """Generate one image per prompt with a fixed seed each; returns the saved PNG paths."""
    if len(prompts) != len(seeds):
        raise RenderError("prompts and seeds must match in length", {"prompts": len(prompts), "seeds": len(seeds)})
    if not prompts:
        return []

    pipe = get_pipeline(tuple(candidates))
    device = _get_device()
    steps, guidance = params.steps, params.guidance_scale
    negative = params.negative_prompt or None

    # Turbo prefers very low steps and no guidance
    if _is_turbo(pipe):
        steps = min(steps, 6)
        guidance = 0.0
        negative = None

    gens = [torch.Generator(device=device).manual_seed(int(s)) for s in seeds]
    os.makedirs(outputs_dir, exist_ok=True)

    autocast_ctx = torch.autocast("cuda") if device.type == "cuda" else contextlib.nullcontext()
    with torch.inference_mode(), autocast_ctx:
        images = pipe(
            prompts,
            negative_prompt=[negative] * len(prompts) if negative else None,
            height=params.height,
            width=params.width,
            num_inference_steps=int(steps),
            guidance_scale=float(guidance),
            generator=gens,
        ).images

    paths: List[str] = []
    for img, seed in zip(images, seeds):
        out_path = os.path.join(outputs_dir, f"{file_prefix}_seed{seed}_{params.width}x{params.height}.png")
        img.save(out_path)
        paths.append(out_path)
    return paths


def render_panels(
    project: StoryboardProject,
    settings: Optional[AppSettings] = None,
    panel_numbers: Optional[Sequence[int]] = None,
) -> List[str]:
    """
    Render the selected panels (all by default) from their generated prompts and
    attach the images. Seeds are base_seed + panel_number so re-renders are stable.
    """
    settings = settings or AppSettings.from_env()
    numbers = list(panel_numbers) if panel_numbers else [p.panel_number for p in project.panels]
    panels = [get_panel(project, n) for n in numbers]

    params = get_generation_params(project.project_type)
    if settings.image_steps:
        params.steps = settings.image_steps
    if settings.guidance_scale is not None:
        params.guidance_scale = settings.guidance_scale

    prompts = [p.prompt.generated_prompt for p in panels]
    seeds = [settings.base_seed + p.panel_number for p in panels]
    for p in panels:
        p.is_generating = True
    try:
        paths = generate_batch(
            prompts,
            seeds,
            params,
            outputs_dir=os.path.join(settings.outputs_dir, project.id),
            candidates=settings.model_candidates,
        )
    except RenderError:
        for p in panels:
            p.is_generating = False
        raise
    except (RuntimeError, OSError, ValueError) as e:
        for p in panels:
            p.is_generating = False
        raise RenderError(f"Image generation failed: {e}", {"project_id": project.id}) from e

    for panel, path in zip(panels, paths):
        attach_panel_image(project, panel.panel_number, path)
    logger.info("Rendered %d panels for project %s", len(paths), project.id)
    return paths
