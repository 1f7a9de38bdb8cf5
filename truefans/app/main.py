from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from truefans.core.config import settings
from truefans.core.exceptions import register_exception_handlers
from truefans.app.startup import configure_logging, run_startup_checks

# ========== Digital Passes ==========
from truefans.modules.digital_passes import digital_pass_router, digital_passes_router

configure_logging()

app = FastAPI(
    title="TrueFans - Digital Pass API",
    description="""
    Digital loyalty passes for the TrueFans restaurant rewards platform.

    ## Features

    * **Wallet Passes** - Issue Apple/Google wallet passes through PassNinja
    * **Email Passes** - Email branded passes to registered users
    * **Visits & Points** - Track visit and point counters per pass
    * **Point-of-Sale Validation** - Staff validate passes and count the visit

    ## Authentication

    Staff and user endpoints expect a bearer JWT issued by the platform's
    identity provider.
    """,
    version="1.0.0",
)

register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(digital_pass_router)
app.include_router(digital_passes_router)


@app.on_event("startup")
async def startup_event():
    """Validate configuration and connectivity on startup"""
    run_startup_checks()


@app.get("/")
def read_root():
    return {"message": "TrueFans digital pass API is running"}


@app.get("/health", tags=["health"])
def health_check():
    return {"status": "ok", "environment": settings.environment}
