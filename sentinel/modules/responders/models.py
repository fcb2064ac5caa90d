from pydantic import EmailStr, Field, HttpUrl

from sentinel.shared.constants import Channel, ResponderRole, Specialty
from sentinel.shared.schemas import CamelModel


class ResponderBase(CamelModel):
    name: str = Field(min_length=1)
    role: ResponderRole
    email: EmailStr
    phone: str | None = None
    webhook: HttpUrl | None = None
    specialties: set[Specialty] = Field(default_factory=set)
    is_active: bool = True


class Responder(ResponderBase):
    """A person eligible to receive emergency notifications."""

    id: str = Field(min_length=1)

    def address_for(self, channel: Channel) -> str | None:
        """Return this responder's non-empty address on a channel, if any."""
        if channel is Channel.EMAIL:
            address: str | None = self.email
        elif channel is Channel.SMS:
            address = self.phone
        else:
            address = str(self.webhook) if self.webhook else None
        return address or None


class ResponderUpsert(ResponderBase):
    """Request body for PUT /responders/{id}; the id comes from the path."""

    def to_responder(self, responder_id: str) -> Responder:
        return Responder(id=responder_id, **self.model_dump())


DEFAULT_RESPONDERS: list[Responder] = [
    Responder(
        id="dr_smith",
        name="Dr. Sarah Smith",
        role=ResponderRole.DOCTOR,
        email="dr.smith@healthcare.org",
        phone="+1-555-0123",
        specialties={Specialty.CARDIAC, Specialty.EMERGENCY},
    ),
    Responder(
        id="nurse_johnson",
        name="Nurse Michael Johnson",
        role=ResponderRole.NURSE,
        email="m.johnson@healthcare.org",
        phone="+1-555-0124",
        specialties={Specialty.RESPIRATORY, Specialty.GENERAL},
    ),
    Responder(
        id="emergency_coord",
        name="Emergency Coordinator",
        role=ResponderRole.EMERGENCY_RESPONDER,
        email="emergency@healthcare.org",
        phone="+1-555-0125",
        webhook="https://emergency-api.healthcare.org/webhook",
        specialties={Specialty.EMERGENCY},
    ),
]
