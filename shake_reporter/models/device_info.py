"""
Device Info Model
Device metadata handed to the reporter by the host application.
All fields are opaque strings; nothing here inspects the device.
"""
from typing import Optional
from pydantic import BaseModel


class DeviceInfo(BaseModel):
    app_version: Optional[str] = None
    build_number: Optional[str] = None
    os_version: Optional[str] = None
    device_model: Optional[str] = None
