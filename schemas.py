from pydantic import BaseModel, ConfigDict, StrictStr, field_validator


class PasteContent(BaseModel):
    """Body accepted by create and update. Only `content` is read."""

    model_config = ConfigDict(extra="ignore")

    content: StrictStr

    @field_validator("content")
    @classmethod
    def encodable(cls, v: str) -> str:
        # lone surrogates survive json.loads but not the driver
        try:
            v.encode("utf-8")
        except UnicodeEncodeError:
            raise ValueError("content is not valid UTF-8")
        return v


class PasteCreate(PasteContent):
    pass


class PasteUpdate(PasteContent):
    pass
