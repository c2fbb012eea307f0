from dataclasses import dataclass


@dataclass(frozen=True)
class CreditCard:
    id: str
    name: str
    color: str = "#3b82f6"
    limit: float = 0.0      # 0 = no limit

    @property
    def has_limit(self) -> bool:
        return self.limit > 0

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "color": self.color, "limit": self.limit}

    @classmethod
    def from_dict(cls, data: dict) -> "CreditCard":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            color=data.get("color", "#3b82f6"),
            limit=float(data.get("limit") or 0),
        )
