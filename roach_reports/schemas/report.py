from pydantic import BaseModel, model_validator

SEVERITY_MIN = 1
SEVERITY_MAX = 5


class ReportCreate(BaseModel):
    has_roaches: bool
    building_id: str | None = None
    address: str | None = None
    unit_number: str | None = None
    severity: int | None = None
    notes: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def normalize_severity(self):
        # Severity only means something when roaches were seen.
        if not self.has_roaches:
            self.severity = None
        elif self.severity is not None and not SEVERITY_MIN <= self.severity <= SEVERITY_MAX:
            raise ValueError(f"severity must be between {SEVERITY_MIN} and {SEVERITY_MAX}")
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be provided together")
        return self


class ReportSummary(BaseModel):
    id: str
    has_roaches: bool
    severity: int | None = None
    created_at: str

    model_config = {"from_attributes": True}


class ReportResponse(BaseModel):
    id: str
    building_id: str
    unit_number: str | None = None
    has_roaches: bool
    severity: int | None = None
    notes: str | None = None
    created_at: str

    model_config = {"from_attributes": True}


class ReportImageCreate(BaseModel):
    image_url: str

    model_config = {"extra": "forbid"}


class ReportImageResponse(BaseModel):
    id: str
    report_id: str
    image_url: str
    created_at: str

    model_config = {"from_attributes": True}
