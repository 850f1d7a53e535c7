from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class DownloadRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    event_name: str = Field(..., alias="eventName", max_length=100)
    coords_value: str = Field(..., alias="coordsValue", max_length=100)
    coordinator_name: str = Field("", alias="coordinatorName", max_length=255)
    passkey: str


class DownloadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    excel_base64: str = Field(..., alias="excelBase64")
    vcf: Optional[str] = None


class DownloadEmptyResponse(BaseModel):
    success: bool = False
    message: str
