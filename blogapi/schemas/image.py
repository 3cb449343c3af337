from pydantic import BaseModel


class ImageMessage(BaseModel):
    message: str


class ImageStored(ImageMessage):
    filePath: str
