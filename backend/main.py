import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI

load_dotenv()

from .config.logging_config import setup_logging
from .config.env_validation import validate_environment
from .config.cors_config import setup_cors
from .config.rate_limit_config import limiter, log_rate_limit_config
from .config.market_data_config import QUOTE_PROVIDER
from .error_handlers import register_exception_handlers
from .middleware.logging_middleware import LoggingMiddleware
from .models.api_responses import HealthResponse
from .services.chat_service import get_chat_service
from .api import api_router

setup_logging(file_output=os.getenv('LOG_FILE_OUTPUT', 'true').lower() == 'true')
validate_environment()

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Portfolio Mirror API",
    description="Past-self portfolio reflections, anti-advice warnings and an AI debate coach",
    version="1.0.0"
)

# Rate limiting (slowapi reads the limiter from app state)
app.state.limiter = limiter
log_rate_limit_config()

register_exception_handlers(app)

app.add_middleware(LoggingMiddleware)
setup_cors(app)

# Versioned API
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """API root"""
    return {"message": "Portfolio Mirror API is running", "version": "1.0.0", "docs": "/docs"}


@app.get("/health", response_model=HealthResponse)
async def health():
    """Liveness check with a summary of configured collaborators"""
    return HealthResponse(
        status="OK",
        message="Portfolio Mirror backend is running!",
        quote_provider=QUOTE_PROVIDER,
        chat_configured=get_chat_service().configured,
    )


logger.info(
    f"Portfolio Mirror initialized - quote provider: {QUOTE_PROVIDER}, "
    f"chat: {'configured' if get_chat_service().configured else 'not configured'}"
)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv('PORT', '8000')))
