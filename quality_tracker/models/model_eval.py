"""Score configuration models."""

from pydantic import BaseModel, Field


class ScoreWeights(BaseModel):
    """Penalty weights for the quality score.

    penalty = errors × error + warnings × warning
    score   = 100 - min(100, round(penalty / divisor))

    Weights are non-negative and the divisor is positive, so the score can
    never increase when an error or warning is added.
    """

    error: float = Field(default=4.0, ge=0.0, description="Penalty per error")
    warning: float = Field(default=1.0, ge=0.0, description="Penalty per warning")
    divisor: float = Field(default=5.0, gt=0.0, description="Penalty scale-down factor")
