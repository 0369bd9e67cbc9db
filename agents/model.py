from pydantic_ai.models.google import GoogleModel
from pydantic_ai.providers.google import GoogleProvider

from config import GEMINI_MODEL_NAME, GOOGLE_API_KEY


def build_model(api_key: str = GOOGLE_API_KEY, model_name: str = GEMINI_MODEL_NAME) -> GoogleModel:
    """Provider & Model setup for the hosted completion service."""
    provider = GoogleProvider(api_key=api_key)
    return GoogleModel(model_name, provider=provider)
