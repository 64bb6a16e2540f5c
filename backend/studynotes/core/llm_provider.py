"""
Provider-agnostic chat model factory.

The provider is chosen from env vars:
  LLM_PROVIDER=openai | gemini | groq
  LLM_MODEL=google/gemini-2.5-flash | gemini-2.5-flash | llama-3.1-70b-versatile
  LLM_API_KEY=your-key
  LLM_BASE_URL=https://ai.gateway.lovable.dev/v1  (openai provider: any OpenAI-compatible gateway)

Client-side retries are disabled for every provider. Failures reach the
artifact generator on the first attempt and are classified there.
"""

from langchain_core.language_models import BaseChatModel

from studynotes.config import get_settings


def create_llm() -> BaseChatModel:
    """Build the chat model the artifact generator talks to.

    Raises:
        ValueError: If provider is not supported.
    """
    settings = get_settings()
    common = {
        "model": settings.LLM_MODEL,
        "temperature": settings.LLM_TEMPERATURE,
        "timeout": settings.LLM_TIMEOUT,
        "max_retries": 0,
    }

    match settings.LLM_PROVIDER:
        case "openai":
            from langchain_openai import ChatOpenAI

            return ChatOpenAI(
                api_key=settings.LLM_API_KEY,
                base_url=settings.LLM_BASE_URL or None,
                **common,
            )

        case "gemini":
            from langchain_google_genai import ChatGoogleGenerativeAI

            return ChatGoogleGenerativeAI(google_api_key=settings.LLM_API_KEY, **common)

        case "groq":
            from langchain_groq import ChatGroq

            return ChatGroq(api_key=settings.LLM_API_KEY, **common)

        case _:
            raise ValueError(
                f"Unknown LLM provider: '{settings.LLM_PROVIDER}'. "
                f"Supported: openai, gemini, groq"
            )
