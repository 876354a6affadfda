## storyboarder/config.py

"""Configuration for the app surface (rendering, outputs, logging)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import ClassVar, List

_DEFAULT_MODELS = ["stabilityai/sd-turbo", "runwayml/stable-diffusion-v1-5"]


def _split_csv(value: str | None, default: List[str]) -> List[str]:
    if not value:
        return list(default)
    items = [v.strip() for v in value.split(",") if v.strip()]
    return items or list(default)


@dataclass(slots=True)
class AppSettings:
    """Settings shared by the Streamlit app, the renderer and exports."""

    env_prefix: ClassVar[str] = "STORYBOARDER_"

    outputs_dir: str = "outputs"
    log_level: str = "INFO"
    model_candidates: List[str] = field(default_factory=lambda: list(_DEFAULT_MODELS))
    image_steps: int | None = None
    guidance_scale: float | None = None
    base_seed: int = 1234
    default_kind: str = "detalles"

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Create settings populated from environment variables."""
        prefix = cls.env_prefix
        steps = os.getenv(f"{prefix}IMAGE_STEPS")
        guidance = os.getenv(f"{prefix}GUIDANCE_SCALE")
        return cls(
            outputs_dir=os.getenv(f"{prefix}OUTPUTS_DIR", "outputs"),
            log_level=os.getenv(f"{prefix}LOG_LEVEL", "INFO"),
            model_candidates=_split_csv(os.getenv(f"{prefix}MODELS"), _DEFAULT_MODELS),
            image_steps=int(steps) if steps else None,
            guidance_scale=float(guidance) if guidance else None,
            base_seed=int(os.getenv(f"{prefix}BASE_SEED", "1234")),
            default_kind=os.getenv(f"{prefix}DEFAULT_KIND", "detalles"),
        )
