from pydantic import BaseModel


# 📝 Datos que se reciben al registrar un nuevo usuario (createUser)
class UserInput(BaseModel):
    email: str
    name: str
    password: str


# 🔑 Datos que se devuelven al iniciar sesión (signIn)
class AuthData(BaseModel):
    token: str
    userId: str
