"""REST API for the pelada roster, draft, cash box and fee payments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List

from fastapi import Depends, FastAPI, File, Form, Request, Response, UploadFile
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from pelada.api.schemas import (
    AuthStatusResponse,
    CancelRequest,
    DraftResponse,
    FeeConfigRequest,
    FeeSummaryResponse,
    LoginRequest,
    MessageResponse,
    PaymentResultResponse,
    PaymentsResponse,
    PayRequest,
    TransactionRequest,
)
from pelada.auth import TokenSigner, check_password
from pelada.config import Settings
from pelada.errors import AuthFailure, PeladaError, StorageFailure
from pelada.ledger import LedgerService
from pelada.media import LocalPhotoStore, PhotoStore, PhotoUpload
from pelada.models import Ledger, Player, TeamAssignment
from pelada.payments import PaymentOutcome, PaymentTracker
from pelada.persistence import DocumentStore, open_store
from pelada.roster import PlayerRegistry
from pelada.teams import TeamService, auto_generate, available_pool


logger = logging.getLogger("uvicorn.error")


@dataclass
class AppContext:
    """Collaborators shared by every request of one application instance."""

    settings: Settings
    store: DocumentStore
    photos: PhotoStore
    signer: TokenSigner

    def registry(self) -> PlayerRegistry:
        return PlayerRegistry(self.store, self.photos)

    def ledger(self) -> LedgerService:
        return LedgerService(self.store)

    def teams(self) -> TeamService:
        return TeamService(self.store)

    def payments(self) -> PaymentTracker:
        return PaymentTracker(
            self.store,
            self.registry(),
            self.ledger(),
            monthly_fee_base=self.settings.monthly_fee_base,
        )


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def require_admin(request: Request, context: AppContext = Depends(get_context)) -> dict[str, Any]:
    return context.signer.verify(request.cookies.get(context.settings.cookie_name))


async def _read_upload(upload: UploadFile | None) -> PhotoUpload | None:
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    if not content:
        return None
    return PhotoUpload(filename=upload.filename, content=content)


def _payment_result(outcome: PaymentOutcome) -> PaymentResultResponse:
    return PaymentResultResponse(
        payments=PaymentsResponse.from_state(outcome.state),
        ledger=outcome.ledger,
    )


def create_app(
    settings: Settings | None = None,
    *,
    store: DocumentStore | None = None,
    photos: PhotoStore | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="pelada")
    context = AppContext(
        settings=settings,
        store=store or open_store(settings),
        photos=photos or LocalPhotoStore(settings.uploads_dir),
        signer=TokenSigner(settings.secret_key, max_age=settings.token_ttl),
    )
    app.state.context = context

    uploads_dir = settings.uploads_dir
    uploads_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=str(uploads_dir)), name="uploads")

    @app.exception_handler(PeladaError)
    async def handle_pelada_error(request: Request, exc: PeladaError) -> JSONResponse:
        if isinstance(exc, StorageFailure):
            logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
        response = JSONResponse(status_code=exc.status_code, content={"detail": exc.message})
        if isinstance(exc, AuthFailure):
            response.delete_cookie(settings.cookie_name, path="/")
        return response

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    # --- players -----------------------------------------------------------

    @app.get("/api/jogadores", response_model=List[Player])
    async def list_players(context: AppContext = Depends(get_context)) -> List[Player]:
        return context.registry().list()

    @app.post("/api/jogadores", response_model=Player, status_code=201, dependencies=[Depends(require_admin)])
    async def create_player(
        name: str = Form(...),
        is_goalkeeper: bool = Form(False, alias="isGoalkeeper"),
        photo: UploadFile | None = File(None),
        context: AppContext = Depends(get_context),
    ) -> Player:
        return context.registry().create(name, is_goalkeeper, await _read_upload(photo))

    @app.put("/api/jogadores/{player_id}", response_model=Player, dependencies=[Depends(require_admin)])
    async def update_player(
        player_id: str,
        name: str | None = Form(None),
        is_goalkeeper: bool | None = Form(None, alias="isGoalkeeper"),
        photo: UploadFile | None = File(None),
        context: AppContext = Depends(get_context),
    ) -> Player:
        return context.registry().update(
            player_id,
            name=name,
            is_goalkeeper=is_goalkeeper,
            photo=await _read_upload(photo),
        )

    @app.delete("/api/jogadores/{player_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
    async def delete_player(player_id: str, context: AppContext = Depends(get_context)) -> MessageResponse:
        context.registry().delete(player_id)
        return MessageResponse(message="Jogador removido com sucesso")

    @app.post("/api/jogadores/reset", response_model=MessageResponse, dependencies=[Depends(require_admin)])
    async def reset_players(context: AppContext = Depends(get_context)) -> MessageResponse:
        context.registry().reset_all()
        return MessageResponse(message="Todos os jogadores, pagamentos e times foram removidos.")

    # --- monthly teams -------------------------------------------------------

    @app.get("/api/time-do-mes", response_model=TeamAssignment)
    async def get_teams(context: AppContext = Depends(get_context)) -> TeamAssignment:
        return context.teams().load()

    @app.post("/api/time-do-mes", response_model=TeamAssignment, dependencies=[Depends(require_admin)])
    async def save_teams(assignment: TeamAssignment, context: AppContext = Depends(get_context)) -> TeamAssignment:
        return context.teams().save(assignment)

    @app.post("/api/time-do-mes/reset", response_model=MessageResponse, dependencies=[Depends(require_admin)])
    async def reset_teams(context: AppContext = Depends(get_context)) -> MessageResponse:
        context.teams().reset()
        return MessageResponse(message="Times limpos.")

    @app.post("/api/time-do-mes/sortear", response_model=DraftResponse, dependencies=[Depends(require_admin)])
    async def draft_teams(context: AppContext = Depends(get_context)) -> DraftResponse:
        players = context.registry().list()
        assignment = auto_generate(players)
        return DraftResponse(teams=assignment, pool=available_pool(assignment, players))

    # --- cash box ------------------------------------------------------------

    @app.get("/api/caixinha", response_model=Ledger)
    async def get_ledger(context: AppContext = Depends(get_context)) -> Ledger:
        return context.ledger().load()

    @app.post("/api/caixinha", response_model=Ledger, status_code=201, dependencies=[Depends(require_admin)])
    async def add_transaction(payload: TransactionRequest, context: AppContext = Depends(get_context)) -> Ledger:
        return context.ledger().record(
            description=payload.description,
            amount=payload.amount,
            direction=payload.direction,
            player_id=payload.player_id,
            player_name=payload.player_name,
        )

    @app.post("/api/caixinha/reset", response_model=MessageResponse, dependencies=[Depends(require_admin)])
    async def reset_ledger(context: AppContext = Depends(get_context)) -> MessageResponse:
        context.ledger().reset()
        return MessageResponse(message="Caixinha zerada.")

    # --- payments ------------------------------------------------------------

    @app.get("/api/pagamentos", response_model=PaymentsResponse)
    async def get_payments(context: AppContext = Depends(get_context)) -> PaymentsResponse:
        return PaymentsResponse.from_state(context.payments().load())

    @app.get("/api/pagamentos/resumo", response_model=FeeSummaryResponse)
    async def get_fee_summary(context: AppContext = Depends(get_context)) -> FeeSummaryResponse:
        summary = context.payments().summary()
        return FeeSummaryResponse(
            player_count=summary.player_count,
            non_goalkeeper_count=summary.non_goalkeeper_count,
            monthly_fee_base=summary.monthly_fee_base,
            monthly_fee_per_player=summary.monthly_fee_per_player,
            event_fee=summary.event_fee,
            total_collected=summary.total_collected,
        )

    @app.post("/api/pagamentos/config", response_model=PaymentsResponse, dependencies=[Depends(require_admin)])
    async def set_fee_config(payload: FeeConfigRequest, context: AppContext = Depends(get_context)) -> PaymentsResponse:
        tracker = context.payments()
        tracker.set_fee_config(payload.event_fee_base)
        return PaymentsResponse.from_state(tracker.load())

    @app.post("/api/pagamentos/pagar", response_model=PaymentResultResponse, dependencies=[Depends(require_admin)])
    async def pay_fee(payload: PayRequest, context: AppContext = Depends(get_context)) -> PaymentResultResponse:
        outcome = context.payments().pay(
            payload.player_id,
            payload.fee_type,
            payload.amount,
            payload.player_name,
        )
        return _payment_result(outcome)

    @app.post("/api/pagamentos/cancelar", response_model=PaymentResultResponse, dependencies=[Depends(require_admin)])
    async def cancel_fee(payload: CancelRequest, context: AppContext = Depends(get_context)) -> PaymentResultResponse:
        return _payment_result(context.payments().cancel(payload.player_id, payload.fee_type))

    @app.post("/api/pagamentos/reset", response_model=PaymentsResponse, dependencies=[Depends(require_admin)])
    async def reset_payments(context: AppContext = Depends(get_context)) -> PaymentsResponse:
        return PaymentsResponse.from_state(context.payments().reset_statuses())

    # --- auth ----------------------------------------------------------------

    @app.post("/api/login", response_model=MessageResponse)
    async def login(
        payload: LoginRequest,
        response: Response,
        context: AppContext = Depends(get_context),
    ) -> MessageResponse:
        if not check_password(payload.password, context.settings.admin_password):
            logger.warning("Failed admin login attempt")
            raise AuthFailure("Senha incorreta.")
        response.set_cookie(
            context.settings.cookie_name,
            context.signer.issue(),
            max_age=context.settings.token_ttl,
            httponly=True,
            samesite="lax",
            secure=context.settings.cookie_secure,
            path="/",
        )
        return MessageResponse(message="Login realizado com sucesso.")

    @app.post("/api/logout", response_model=MessageResponse)
    async def logout(response: Response, context: AppContext = Depends(get_context)) -> MessageResponse:
        response.delete_cookie(context.settings.cookie_name, path="/")
        return MessageResponse(message="Logout realizado.")

    @app.get("/api/check-auth", response_model=AuthStatusResponse, dependencies=[Depends(require_admin)])
    async def check_auth() -> AuthStatusResponse:
        return AuthStatusResponse(authenticated=True)

    return app


__all__ = ["AppContext", "create_app", "get_context", "require_admin"]
