from pydantic import BaseModel, ConfigDict


class Origin(BaseModel):
    """Where a site was imported from, and the import run that did it."""
    origin_id: int
    site_id: int
    product: str

    model_config = ConfigDict(from_attributes=True)
