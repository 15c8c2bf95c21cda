"""Domain ports - interfaces implemented by infrastructure adapters"""

from .complaint_api_port import ComplaintApiPort, UploadFile, FormFields, RawPayload

__all__ = [
    "ComplaintApiPort",
    "UploadFile",
    "FormFields",
    "RawPayload",
]
