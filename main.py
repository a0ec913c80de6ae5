import os
import sys

from dotenv import load_dotenv
import uvicorn

BACKEND_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "backend")
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from config import API_HOST, API_PORT  # noqa: E402

load_dotenv()

if __name__ == '__main__':
    uvicorn.run("app:app",
                app_dir=BACKEND_DIR,
                host=API_HOST,
                port=API_PORT,
                reload=True)
