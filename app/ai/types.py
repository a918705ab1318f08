from dataclasses import dataclass
from typing import Protocol


PROCESSING = "PROCESSING"
ACTIVE = "ACTIVE"
FAILED = "FAILED"


@dataclass(frozen=True)
class RemoteFile:
    name: str
    uri: str
    mime_type: str
    state: str

    @property
    def is_processing(self) -> bool:
        return self.state == PROCESSING


class SummarizerClient(Protocol):
    @property
    def model(self) -> str: ...

    async def upload_file(self, path: str, *, display_name: str, mime_type: str) -> RemoteFile: ...

    async def get_file(self, name: str) -> RemoteFile: ...

    async def generate_from_file(self, prompt: str, *, file_uri: str, mime_type: str) -> str: ...

    async def generate_from_url(self, prompt: str, *, url: str) -> str: ...
