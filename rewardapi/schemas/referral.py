from pydantic import BaseModel, Field


class ReferralSummaryResponse(BaseModel):
    referral_code: str = Field(..., description="The user's own id")
    referral_link: str
    referred_count: int
    bonus_per_referral: int
