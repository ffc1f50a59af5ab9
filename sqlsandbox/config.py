from pydantic import BaseModel
from dotenv import load_dotenv
import os

# Load environment variables from .env file
load_dotenv()


def _split(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


class Settings(BaseModel):
    # Server
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3001"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Browser origins allowed to call the API
    allowed_origins: list[str] = _split(
        os.getenv(
            "ALLOWED_ORIGINS",
            "https://sqlchatbotnew.netlify.app,http://localhost:5173",
        )
    )

    # LLM
    llm_provider: str = os.getenv("LLM_PROVIDER", "gemini")
    llm_timeout: float = float(os.getenv("LLM_TIMEOUT", "60"))

    # Gemini (hosted)
    gemini_api_key: str = os.getenv("GEMINI_API_KEY", "")
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    gemini_url: str = os.getenv(
        "GEMINI_URL", "https://generativelanguage.googleapis.com/v1beta"
    )

    # Ollama runtime (local)
    ollama_url: str = os.getenv("OLLAMA_URL", "http://127.0.0.1:11434")
    ollama_model: str = os.getenv("OLLAMA_MODEL", "mistral")

# Create a global settings object
settings = Settings()
