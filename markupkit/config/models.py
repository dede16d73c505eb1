from pydantic import BaseModel, Field
from typing import Literal

from markupkit.registry.models import RendererDescriptor


class EngineSettings(BaseModel):
    default_timeout: float | None = Field(default=30.0, gt=0)


class RegistrySettings(BaseModel):
    on_duplicate: Literal["reject", "override"] = "reject"
    disabled: list[str] = Field(default_factory=list)


class MarkupConfig(BaseModel):
    engine: EngineSettings = Field(default_factory=EngineSettings)
    registry: RegistrySettings = Field(default_factory=RegistrySettings)
    renderers: list[RendererDescriptor] = Field(default_factory=list)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
