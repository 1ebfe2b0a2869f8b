from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routes.generate import router as generate_router
from .errors import PingEngineError

app = FastAPI(title="Ping! conversation engine")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PingEngineError)
async def ping_engine_error_handler(request: Request, exc: PingEngineError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__, "stage": exc.stage},
    )


app.include_router(generate_router)
