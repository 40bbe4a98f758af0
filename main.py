from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config.settings import settings

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
# quiet HTTP library debug logs
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)


# ✅ middlewares
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ routers
from routers import (
    grade_categories, grades, meta, professors, promotions,
    reports, students, subjects,
)

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

# ✅ CORS (frontend origins come from settings)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ✅ request latency (adds X-Latency-Ms response header)
app.add_middleware(TimingMiddleware)

# ✅ global error handlers (uniform JSON error envelope)
add_error_handlers(app)

# ✅ /v1 prefixed routers
app.include_router(meta.router,             prefix="/v1")
app.include_router(promotions.router,       prefix="/v1")
app.include_router(subjects.router,         prefix="/v1")
app.include_router(professors.router,       prefix="/v1")
app.include_router(students.router,         prefix="/v1")
app.include_router(grade_categories.router, prefix="/v1")
app.include_router(grades.router,           prefix="/v1")
app.include_router(reports.router,          prefix="/v1")

# ✅ health check
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}

# ✅ root
@app.get("/")
def root():
    return {"message": f"{settings.APP_TITLE} v{settings.APP_VERSION}"}
