"""Named, persisted gesture templates."""

from __future__ import annotations

import secrets
from dataclasses import dataclass

from gesture_trace.model import Model

ID_BITS = 32


def random_id() -> int:
    """Random 32-bit template id. Uniqueness is checked by the store."""
    return secrets.randbits(ID_BITS)


@dataclass
class Template:
    """A named model to recognize."""
    id: int
    name: str
    model: Model

    @classmethod
    def new(cls, name: str, model: Model) -> Template:
        """Create a template with a freshly picked random id."""
        return cls(id=random_id(), name=name, model=model)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "model": self.model.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> Template:
        template_id = int(data["id"])
        if not 0 <= template_id < 2 ** ID_BITS:
            raise ValueError(f"template id out of range: {template_id}")
        return cls(
            id=template_id,
            name=str(data["name"]),
            model=Model.from_dict(data["model"]),
        )
