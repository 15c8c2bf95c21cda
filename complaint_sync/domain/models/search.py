"""
Search filters for the advanced complaint search endpoint
"""
from dataclasses import dataclass, fields
from datetime import date
from typing import Dict, Optional, Union


@dataclass(frozen=True)
class ComplaintFilters:
    """
    Filter set for complaint list and search screens.

    Frozen so one filter set can be shared between screens.
    """
    general_search: Optional[str] = None
    status_id: Optional[int] = None
    priority_id: Optional[int] = None
    type_id: Optional[int] = None
    starting_date: Optional[Union[date, str]] = None
    end_date: Optional[Union[date, str]] = None
    sort_by: Optional[Union[int, str]] = None

    def is_empty(self) -> bool:
        return not self.to_params()

    def to_params(self) -> Dict[str, str]:
        """Query parameters with unset values and blank search text dropped"""
        params = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, str):
                value = value.strip()
                if not value:
                    continue
            elif isinstance(value, date):
                value = value.isoformat()
            params[f.name] = str(value)
        return params
