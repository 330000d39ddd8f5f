import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request, status
from pydantic import BaseModel, ConfigDict, Field, StrictInt

from flashdeck.application.config import resolve_config
from flashdeck.application.study_session import StudyService
from flashdeck.consts import VERSION
from flashdeck.domain.constants import MAX_QUALITY, MIN_QUALITY
from flashdeck.domain.scheduling.errors import (
    CardNotFoundError,
    InvalidQualityError,
    StaleCardStateError,
)
from flashdeck.domain.scheduling.models import Flashcard, ReviewState
from flashdeck.domain.scheduling.sm2 import initialize_state, review
from flashdeck.infrastructure.memory_repository import InMemoryCardRepository

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("flashdeck.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    config = resolve_config()
    app.state.service = StudyService(InMemoryCardRepository(), config)
    logger.info(f"flashdeck server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("flashdeck server shutting down...")


app = FastAPI(
    title="flashdeck",
    description="Flashcard study service with SM-2 scheduling.",
    version=VERSION,
    lifespan=lifespan,
)

start_time = time.time()


def get_service(request: Request) -> StudyService:
    return request.app.state.service


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class StateModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    easiness: float
    interval: int = Field(ge=0)
    repetition: int = Field(ge=0)
    due_at: int = Field(alias="dueAt")

    @classmethod
    def from_state(cls, state: ReviewState) -> "StateModel":
        return cls(**state.to_record())

    def to_state(self) -> ReviewState:
        return ReviewState(
            easiness=self.easiness,
            interval=self.interval,
            repetition=self.repetition,
            due_at=self.due_at,
        )


class CardModel(BaseModel):
    id: str
    library_id: str
    front: str
    back: str
    created_at: int
    version: int
    state: StateModel

    @classmethod
    def from_card(cls, card: Flashcard) -> "CardModel":
        return cls(
            id=card.id,
            library_id=card.library_id,
            front=card.front,
            back=card.back,
            created_at=card.created_at,
            version=card.version,
            state=StateModel.from_state(card.state),
        )


class InitRequest(BaseModel):
    now: int | None = None


class ReviewRequest(BaseModel):
    state: StateModel
    quality: StrictInt = Field(ge=MIN_QUALITY, le=MAX_QUALITY)
    now: int | None = None


class CreateCardRequest(BaseModel):
    front: str = Field(min_length=1)
    back: str = Field(min_length=1)
    now: int | None = None


class CardReviewRequest(BaseModel):
    quality: StrictInt = Field(ge=MIN_QUALITY, le=MAX_QUALITY)
    now: int | None = None


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.post("/scheduler/init", response_model=StateModel)
async def init_state(req: InitRequest):
    """Initial scheduling state for a new card."""
    return StateModel.from_state(initialize_state(req.now))


@app.post("/scheduler/review", response_model=StateModel)
async def review_state(req: ReviewRequest):
    """Apply one graded review to an explicit state, without storage."""
    try:
        state = review(req.state.to_state(), req.quality, req.now)
    except InvalidQualityError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return StateModel.from_state(state)


@app.post(
    "/libraries/{library_id}/cards",
    response_model=CardModel,
    status_code=status.HTTP_201_CREATED,
)
async def create_card(
    library_id: str,
    req: CreateCardRequest,
    service: StudyService = Depends(get_service),
):
    try:
        card = await service.add_card(library_id, req.front, req.back, req.now)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return CardModel.from_card(card)


@app.get("/libraries/{library_id}/due", response_model=list[CardModel])
async def due_cards(
    library_id: str,
    now: int | None = None,
    service: StudyService = Depends(get_service),
):
    cards = await service.due_cards(library_id, now)
    return [CardModel.from_card(c) for c in cards]


@app.post("/cards/{card_id}/review", response_model=CardModel)
async def review_card(
    card_id: str,
    req: CardReviewRequest,
    service: StudyService = Depends(get_service),
):
    """Grade a stored card and persist its next state."""
    try:
        card = await service.answer(card_id, req.quality, req.now)
    except CardNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except StaleCardStateError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except InvalidQualityError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return CardModel.from_card(card)
