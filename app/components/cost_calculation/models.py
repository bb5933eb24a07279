from pydantic import BaseModel
from typing import Any, Dict, Optional


class CostCalculationRequest(BaseModel):
    """Request for cost calculation.

    ``estimation`` is the raw state value; it is validated by the service so
    that a malformed estimation is reported as an invalid state.
    """
    estimation: Optional[Dict[str, Any]] = None
