"""Wire schemas for the privileged account-deletion function."""

from pydantic import BaseModel, ConfigDict, Field


class DeleteAccountRequest(BaseModel):
    """Body: {"userId": "...", "reason": "..."}. userId is checked by the workflow, not here."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user_id: str | None = Field(default=None, alias="userId")
    reason: str | None = None


class DeleteAccountSuccess(BaseModel):
    success: bool = True


class DeleteAccountError(BaseModel):
    error: str
