"""Contact form and data submission schemas."""

import base64
import binascii

from pydantic import Field

from mareye.schemas.base import CamelModel


class ContactForm(CamelModel):
    """Message from the public contact form."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    email: str = ""
    institution: str = ""


class SelectedTool(CamelModel):
    name: str
    description: str = ""


class DataSubmission(CamelModel):
    """Dataset offered by a researcher for processing."""

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    institution: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    selected_tools: list[SelectedTool] = Field(default_factory=list)
    file_name: str | None = None
    file_size: int | None = None
    file_type: str | None = None
    # Data URL ("data:<mime>;base64,<payload>")
    file_base64: str | None = None

    def file_summary(self) -> str:
        if not self.file_name:
            return "No file attached"
        size = f"{self.file_size / 1024 / 1024:.2f} MB" if self.file_size else "Unknown size"
        return f"Attached File: {self.file_name} ({size}, {self.file_type or 'Unknown type'})"

    def decoded_file(self) -> bytes | None:
        """Decode the attached file, or None if absent or malformed."""
        if not self.file_base64 or not self.file_name:
            return None
        payload = self.file_base64.split(",", 1)[-1]
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            return None


class ContactResponse(CamelModel):
    message: str
