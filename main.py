import uvicorn

from hellorun.config import settings
from hellorun.main import app  # noqa: F401

if __name__ == "__main__":
    uvicorn.run("hellorun.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
