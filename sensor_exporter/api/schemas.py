from __future__ import annotations
from pydantic import BaseModel, Field
from typing import Optional, Literal


class SimManualRequest(BaseModel):
    temperature: Optional[float] = None
    humidity: Optional[float] = Field(default=None, ge=0, le=100)
    pressure: Optional[float] = Field(default=None, gt=0)
    broadband: Optional[float] = Field(default=None, ge=0)
    infrared: Optional[float] = Field(default=None, ge=0)

    def channel_values(self) -> dict[str, float]:
        return {k: v for k, v in self.model_dump().items() if v is not None}


class SimPatternRequest(BaseModel):
    channel: Literal["temperature", "humidity", "pressure", "broadband", "infrared"]
    type: Literal["sine", "step", "ramp", "random"]
    baseline: float = 22.0
    amplitude: float = 2.0
    period_s: float = Field(default=600, gt=0)
    noise: float = Field(default=0.0, ge=0)
    step_low: float = 20.0
    step_high: float = 24.0
    step_period_s: float = Field(default=120, gt=0)
    ramp_min: float = 18.0
    ramp_max: float = 26.0
    ramp_period_s: float = Field(default=600, gt=0)
