from pydantic import BaseModel, model_validator


class BuildingCreate(BaseModel):
    address: str
    city: str = "New York"
    state: str = "NY"
    zip: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def check_coordinates_pair(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        return self


class BuildingResponse(BaseModel):
    id: str
    address: str
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    created_at: str

    model_config = {"from_attributes": True}


class BuildingStats(BaseModel):
    totalReports: int
    positiveReports: int
    percentPositive: int
    avgSeverity: float
