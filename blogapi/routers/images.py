from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from blogapi.auth import require_authenticated
from blogapi.schemas.image import ImageMessage, ImageStored

router = APIRouter(tags=["Images"])


@router.put("/post-image", status_code=201, response_model=ImageStored)
async def store_image(
    request: Request,
    image: UploadFile | None = File(None),
    old_path: str | None = Form(None, alias="oldPath"),
):
    require_authenticated(request.state.identity)

    storage = request.app.state.images
    if image is None or not storage.accepts(image.content_type):
        return JSONResponse(status_code=200, content=ImageMessage(message="No file provided!").model_dump())

    if old_path:
        storage.clear(old_path)

    file_path = await run_in_threadpool(storage.store, image.filename, image.file)
    return ImageStored(message="File stored!", filePath=file_path)
