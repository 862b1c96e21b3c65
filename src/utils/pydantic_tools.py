from typing import Any

from pydantic import BaseModel, ConfigDict


class BaseModelWithMethods(BaseModel):
    """Base model for every wire and cache payload.

    Fields may be populated either by name or by their camelCase wire alias,
    and serialize by alias so cached payloads round-trip unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, use_enum_values=False)

    def to_json(self, **kwargs: Any) -> str:
        kwargs.setdefault("by_alias", True)
        return self.model_dump_json(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
