from fastapi import APIRouter, Depends, HTTPException, Header, Request

from taixiu.api.schemas import IngestIn, IngestOut, LearnIn, PredictionOut, StateOut, SunwinOut
from taixiu.config import settings
from taixiu.core.symbols import tail
from taixiu.core.validation import is_valid_result, normalize_result
from taixiu.models import Round
from taixiu.services import PredictorService
from taixiu.upstream import UpstreamError, fetch_rounds

router = APIRouter()


def _auth(api_key_header: str | None = Header(default=None, alias="X-API-Key")):
    if settings.api_key and api_key_header != settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")


def get_service(request: Request) -> PredictorService:
    return request.app.state.service


def _sync(service: PredictorService) -> int:
    try:
        rounds = fetch_rounds()
    except UpstreamError as e:
        raise HTTPException(502, detail=str(e))
    return service.ingest(rounds)


@router.get('/predict', response_model=PredictionOut)
async def predict(service: PredictorService = Depends(get_service)):
    return service.predict()


@router.post('/learn', response_model=StateOut)
async def learn(data: LearnIn, service: PredictorService = Depends(get_service), ok=Depends(_auth)):
    if data.result is not None and not is_valid_result(data.result):
        raise HTTPException(400, detail="result must be Tài or Xỉu")
    r = Round.from_dice(data.d1, data.d2, data.d3, session=data.session)
    if data.result is not None:
        r = r.model_copy(update={'result': normalize_result(data.result)})
    service.learn(r)
    return service.state()


@router.post('/ingest', response_model=IngestOut)
async def ingest(data: IngestIn, service: PredictorService = Depends(get_service), ok=Depends(_auth)):
    added = service.ingest(Round.from_payload(x) for x in data.rounds)
    return {'added': added, 'history_len': len(service.history)}


@router.post('/sync', response_model=IngestOut)
def sync(service: PredictorService = Depends(get_service), ok=Depends(_auth)):
    added = _sync(service)
    return {'added': added, 'history_len': len(service.history)}


@router.get('/state', response_model=StateOut)
async def state(service: PredictorService = Depends(get_service)):
    return service.state()


@router.post('/reset', response_model=StateOut)
async def reset(service: PredictorService = Depends(get_service), ok=Depends(_auth)):
    service.reset()
    return service.state()


@router.get('/api/taixiu/sunwin', response_model=SunwinOut)
def sunwin(service: PredictorService = Depends(get_service)):
    _sync(service)
    if not service.history:
        raise HTTPException(502, detail="upstream returned no rounds")
    pred = service.predict()
    last = service.history[-1]
    pattern = ''.join(tail(service.sequence, 20)).lower().replace('t', 'tài').replace('x', 'xỉu')
    return {
        'Phien': last.session,
        'Phien_sau': last.session + 1 if last.session is not None else None,
        'd1': last.d1, 'd2': last.d2, 'd3': last.d3,
        'Tong': last.total,
        'Result': last.result,
        'Du_doan': pred.prediction,
        'Do_tin_cay': pred.confidence,
        'Giai_thich': pred.reason,
        'Pattern': pattern,
    }
