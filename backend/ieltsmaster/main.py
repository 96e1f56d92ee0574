import logging

from fastapi import FastAPI

from .db import init_db
from .errors import register_exception_handlers
from .services import build_pipeline
from .settings import settings
from .routers import health
from .routers import auth
from .routers import questions
from .routers import submissions
from .routers import results
from .routers import profile

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
	logging.basicConfig(
		level=level.upper(),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)
	logging.getLogger("passlib").setLevel(logging.ERROR)


app = FastAPI(title="IELTS Writing Practice API")
register_exception_handlers(app)
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(questions.router)
app.include_router(submissions.router)
app.include_router(results.router)
app.include_router(profile.router)


@app.on_event("startup")
async def startup_event():
	configure_logging(settings.log_level)
	# Initialize DB schema
	init_db()
	# Mock or AI pipeline, chosen once for the process lifetime
	app.state.pipeline = build_pipeline(settings)
	logger.info("Started (mock_ai=%s, model=%s)", settings.use_mock_ai, settings.openai_model)
