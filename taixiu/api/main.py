from fastapi import FastAPI
from contextlib import asynccontextmanager
from taixiu.api.routes import router
from taixiu.log import setup_logging
from taixiu.services import PredictorService

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    app.state.service = PredictorService()
    yield

app = FastAPI(title="TaiXiu Predictor", lifespan=lifespan)
app.include_router(router)

@app.get("/")
def home():
    return {"ok": True, "app": "TaiXiu Predictor"}
