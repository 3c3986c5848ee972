import logging
import coloredlogs
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from trafficwatch.config import settings
from trafficwatch.exception_handler import custom_exception_handler, trafficwatch_exception_handler
from trafficwatch.api.routes import api_router
from trafficwatch.utils.errors import TrafficWatchError


load_dotenv()

app = FastAPI(title="TrafficWatch")
app.include_router(api_router, prefix="/api")
app.add_exception_handler(TrafficWatchError, trafficwatch_exception_handler)
app.add_exception_handler(Exception, custom_exception_handler)
origins = ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


if settings.ALLOW_OTEL_COLLECTOR.lower() == "true":
    from trafficwatch.utils.logging.logging_config import setup_logging
    setup_logging()


logger = logging.getLogger(__name__)
log_format = "%(asctime)s : %(levelname).4s - %(message)s - [%(name)s]"
coloredlogs.install(level=settings.LOG_LEVEL.lower(), isatty=True, fmt=log_format,
                    level_styles={
                        'debug': {'color': 'white', 'bold': True},
                        'info': {'color': 'green', 'bold': True},
                        'error': {'color': 'red', 'bold': True},
                        'warning': {'color': 'yellow', 'bold': True},
                        'critical': {'color': 'red', 'bold': True}})


@app.get("/")
def read_root():
    return {
        "message": "Welcome",
        "description": "TrafficWatch violation reporting API.",
        "documentation": "For API documentation, visit /docs.",
    }
