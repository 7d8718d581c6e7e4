from typing import Optional

class GenerationError(Exception):
    """Raised when the image service cannot produce an image.

    The message is shown to the user verbatim, so it should be readable
    as-is ("quota exceeded", "prompt blocked by safety filters", ...).
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

def to_data_uri(b64_data: str, mime_type: str) -> str:
    return f"data:{mime_type};base64,{b64_data}"

def short_prompt(prompt: str, limit: int = 50) -> str:
    prompt = prompt.strip()
    if len(prompt) <= limit:
        return prompt
    return prompt[:limit] + "..."
