"""Run script with proper environment loading"""
import sys
from pathlib import Path

# Make the backend directory importable when run from a checkout
BACKEND_DIR = Path(__file__).resolve().parent
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

# Load environment variables
from dotenv import load_dotenv

load_dotenv(BACKEND_DIR.parent / ".env", override=True)

if __name__ == "__main__":
    import uvicorn
    from tierlist.core.config import get_settings

    settings = get_settings()

    from tierlist.main import app

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
    )
