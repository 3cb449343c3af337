from pydantic import BaseModel

# Valor que envía el frontend cuando no se eligió una imagen nueva
IMAGE_UNCHANGED = "undefined"


# 📝 Para crear o actualizar un post
class PostInput(BaseModel):
    title: str
    imageUrl: str
    content: str

    def has_new_image(self) -> bool:
        return bool(self.imageUrl) and self.imageUrl != IMAGE_UNCHANGED


# ✅ Página de posts devuelta por getPosts
class PostPage(BaseModel):
    posts: list[dict]
    totalPosts: int
