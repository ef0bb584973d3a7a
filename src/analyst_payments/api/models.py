"""Pydantic models for inbound request payloads."""

from pydantic import BaseModel, ConfigDict, Field


class CheckoutSessionPayload(BaseModel):
    """Checkout creation request from the booking or bootcamp form."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    customer_email: str = Field(alias="customerEmail", min_length=3)
    customer_name: str = Field(default="", alias="customerName")
    meeting_type_id: str | None = Field(default=None, alias="meetingTypeId")
    bootcamp_id: str | None = Field(default=None, alias="bootcampId")
    notes: str = ""
    selected_analyst: str = Field(default="", alias="selectedAnalyst")
    selected_meeting: str = Field(default="", alias="selectedMeeting")
    selected_date: str = Field(default="", alias="selectedDate")
    selected_time: str = Field(default="", alias="selectedTime")
    selected_timezone: str = Field(default="", alias="selectedTimezone")


class CalendlyUpdatePayload(BaseModel):
    """Calendly scheduling result for a paid booking."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId", min_length=1)
    calendly_event_uri: str | None = Field(default=None, alias="calendlyEventUri")
    calendly_invitee_uri: str | None = Field(
        default=None, alias="calendlyInviteeUri"
    )
