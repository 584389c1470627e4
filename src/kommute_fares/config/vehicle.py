"""Vehicle classes offered to riders."""

from pydantic import BaseModel, ConfigDict, Field


class VehicleClass(BaseModel):
    """One bookable vehicle class."""

    model_config = ConfigDict(frozen=True)

    vehicle_type: str = Field(default="kommute-4", description="Stable identifier, e.g. 'kommute-large'")
    name: str = Field(default="Kommute 4", description="Human label shown to riders")
    cost_factor: float = Field(
        default=0.85, gt=0,
        description="Multiplier on the raw fare (0.85 compact, 1.25 large, 1.45 premium).",
    )


def default_vehicle_catalog() -> list[VehicleClass]:
    """The three classes offered at launch."""
    return [
        VehicleClass(vehicle_type="kommute-4", name="Kommute 4", cost_factor=0.85),
        VehicleClass(vehicle_type="kommute-large", name="Kommute Large", cost_factor=1.25),
        VehicleClass(vehicle_type="kommute-premium", name="Kommute Premium", cost_factor=1.45),
    ]
