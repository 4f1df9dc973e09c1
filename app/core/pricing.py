from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PLAN_ID = "monthly"


class PricingPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    amount: int = Field(gt=0)  # smallest currency unit (paise)
    currency: str = "INR"
    description: str


PRICING_PLANS: Dict[str, PricingPlan] = {
    "monthly": PricingPlan(id="monthly", amount=900, currency="INR", description="Monthly membership"),
    "yearly": PricingPlan(id="yearly", amount=9900, currency="INR", description="Yearly membership"),
}


def resolve_plan(plan_id: Optional[str]) -> PricingPlan:
    # Unknown plans are billed as monthly rather than rejected.
    if isinstance(plan_id, str) and plan_id in PRICING_PLANS:
        return PRICING_PLANS[plan_id]
    return PRICING_PLANS[DEFAULT_PLAN_ID]
