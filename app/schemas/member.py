from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict


class Member(BaseModel):
    """A Ghost member as returned by the Admin API. Unknown fields are ignored."""
    model_config = ConfigDict(extra="ignore")

    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    note: Optional[str] = None
    subscribed: Optional[bool] = None
    labels: List[Union[str, Dict[str, Any]]] = []

    def label_names(self) -> List[str]:
        # Ghost returns labels as objects; writes accept plain names.
        names = []
        for label in self.labels:
            if isinstance(label, dict):
                name = label.get("name")
                if name:
                    names.append(name)
            else:
                names.append(label)
        return names
