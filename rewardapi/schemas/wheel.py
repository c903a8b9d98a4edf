from typing import List, Optional

from pydantic import BaseModel, Field


class WheelSliceResponse(BaseModel):
    index: int
    label: str
    points: Optional[int] = Field(None, description="null for the jackpot slot")


class WheelResponse(BaseModel):
    slices: List[WheelSliceResponse]
    jackpot_min: int
    jackpot_max: int


class SpinResponse(BaseModel):
    success: bool = True
    prize: str = Field(..., description="Label of the winning slice")
    points_awarded: int
    slice_index: int = Field(..., description="Index into the wheel slice table used for the draw")
    is_jackpot: bool = False
